"""
endpointkit — Parameter Carrier Tests
=====================================

What:  Tests for attach_params / retrieve_params.
"""

import pytest

from endpointkit.context import background
from endpointkit.exceptions import NotFoundError
from endpointkit.params import attach_params, retrieve_params


class TestRetrieveParams:

    def test_missing_params(self):
        with pytest.raises(NotFoundError, match="no params in context"):
            retrieve_params(background())

    def test_returns_attached_mapping(self):
        ctx = attach_params(background(), {"id": "42", "slug": "groceries"})
        assert dict(retrieve_params(ctx)) == {"id": "42", "slug": "groceries"}

    def test_empty_mapping_is_still_found(self):
        ctx = attach_params(background(), {})
        assert dict(retrieve_params(ctx)) == {}

    def test_mapping_is_read_only(self):
        ctx = attach_params(background(), {"id": "42"})
        with pytest.raises(TypeError):
            retrieve_params(ctx)["id"] = "43"  # type: ignore[index]

    def test_later_changes_to_source_dict_are_not_seen(self):
        source = {"id": "42"}
        ctx = attach_params(background(), source)
        source["id"] = "99"
        assert retrieve_params(ctx)["id"] == "42"

    def test_parent_context_unchanged(self):
        parent = background()
        attach_params(parent, {"id": "42"})
        with pytest.raises(NotFoundError):
            retrieve_params(parent)

    def test_string_keys_do_not_collide(self):
        ctx = attach_params(background(), {"id": "42"})
        ctx = ctx.with_value("params", "something else")
        assert retrieve_params(ctx)["id"] == "42"
        assert ctx.value("params") == "something else"

    @pytest.mark.asyncio
    async def test_params_survive_derived_contexts(self):
        ctx = attach_params(background(), {"id": "42"})
        child, cancel = ctx.with_timeout(1.0)
        try:
            assert retrieve_params(child)["id"] == "42"
        finally:
            cancel()
