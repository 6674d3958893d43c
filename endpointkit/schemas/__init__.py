"""Response schemas shared by every endpoint."""
