"""
endpointkit — Request Context
=============================

What:  An immutable, per-request context that carries values, an optional
       deadline and an advisory cancellation signal down the endpoint chain.
How:   Every derivation (`with_value`, `with_deadline`, `with_timeout`,
       `with_cancel`) returns a NEW context that points at its parent; the
       parent is never modified. Cancellation flows from a cancellable
       context to all of its cancellable descendants.
Who:   Created fresh per request by `Server`, extended by `attach_params` and
       the `timeout` decorator, read by endpoints.

Cancellation is cooperative. Nothing here interrupts running code: an
endpoint that wants to honour a deadline checks `ctx.err`, calls
`ctx.check()`, or awaits `ctx.wait()`.

    ctx, cancel = background().with_timeout(0.05)
    try:
        await do_work(ctx)
    finally:
        cancel()

Deadlines are expressed in `time.monotonic()` seconds.
"""

import asyncio
import time
from typing import Any, Callable, Optional, Set, Tuple

CancelFunc = Callable[[], None]


class ContextError(Exception):
    """Reason a context is done."""


class Canceled(ContextError):
    """The context was cancelled explicitly."""

    def __init__(self) -> None:
        super().__init__("context canceled")


class DeadlineExceeded(ContextError):
    """The context's deadline passed."""

    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class Context:
    """
    Root context: no values, no deadline, never done.

    Use `background()` to obtain the shared instance.
    """

    __slots__ = ()

    def value(self, key: Any) -> Any:
        """Return the value stored under `key` by this context or an ancestor, else None."""
        return None

    @property
    def deadline(self) -> Optional[float]:
        return None

    @property
    def err(self) -> Optional[ContextError]:
        """None while the context is live; the cancellation reason once done."""
        return None

    def done(self) -> bool:
        return self.err is not None

    def check(self) -> None:
        """Raise the cancellation reason if the context is done."""
        err = self.err
        if err is not None:
            # Fresh instance per raise; the stored reason keeps no traceback.
            raise type(err)() from None

    async def wait(self) -> ContextError:
        """Block until the context is done and return the reason."""
        scope = self._scope()
        if scope is None:
            # Never done; only task cancellation ends this wait.
            await asyncio.get_running_loop().create_future()
            raise AssertionError("unreachable")
        await scope._event.wait()
        assert scope._err is not None
        return scope._err

    def with_value(self, key: Any, value: Any) -> "Context":
        return _ValueContext(self, key, value)

    def with_cancel(self) -> Tuple["Context", CancelFunc]:
        child = _CancelContext(self, None)
        return child, child.cancel

    def with_deadline(self, deadline: float) -> Tuple["Context", CancelFunc]:
        """
        Derive a context that is done at `deadline` (monotonic seconds) at the
        latest. The returned cancel function must be called once the work is
        finished to release the timer.
        """
        child = _CancelContext(self, deadline)
        return child, child.cancel

    def with_timeout(self, seconds: float) -> Tuple["Context", CancelFunc]:
        return self.with_deadline(time.monotonic() + seconds)

    def _scope(self) -> Optional["_CancelContext"]:
        """Nearest cancellable context in the ancestry (self included)."""
        return None

    def __repr__(self) -> str:
        return "background()"


class _ValueContext(Context):
    __slots__ = ("_parent", "_key", "_value")

    def __init__(self, parent: Context, key: Any, value: Any):
        self._parent = parent
        self._key = key
        self._value = value

    def value(self, key: Any) -> Any:
        if key == self._key:
            return self._value
        return self._parent.value(key)

    @property
    def deadline(self) -> Optional[float]:
        return self._parent.deadline

    @property
    def err(self) -> Optional[ContextError]:
        return self._parent.err

    def _scope(self) -> Optional["_CancelContext"]:
        return self._parent._scope()

    def __repr__(self) -> str:
        return f"{self._parent!r}.with_value({self._key!r}, ...)"


class _CancelContext(Context):
    __slots__ = ("_parent", "_parent_scope", "_deadline", "_event", "_err", "_children", "_timer")

    def __init__(self, parent: Context, deadline: Optional[float]):
        self._parent = parent
        self._event = asyncio.Event()
        self._err: Optional[ContextError] = None
        self._children: Set["_CancelContext"] = set()
        self._timer: Optional[asyncio.TimerHandle] = None

        parent_deadline = parent.deadline
        own_deadline = deadline is not None and (
            parent_deadline is None or deadline < parent_deadline
        )
        self._deadline = deadline if own_deadline else parent_deadline

        self._parent_scope = parent._scope()
        if self._parent_scope is not None:
            if self._parent_scope._err is not None:
                self._cancel(self._parent_scope._err)
                return
            self._parent_scope._children.add(self)

        if own_deadline:
            assert deadline is not None
            delay = deadline - time.monotonic()
            if delay <= 0:
                self._cancel(DeadlineExceeded())
                return
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(delay, self._cancel, DeadlineExceeded())

    def value(self, key: Any) -> Any:
        return self._parent.value(key)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def err(self) -> Optional[ContextError]:
        return self._err

    def cancel(self) -> None:
        """Mark the context (and its descendants) cancelled; idempotent."""
        self._cancel(Canceled())

    def _cancel(self, err: ContextError) -> None:
        if self._err is not None:
            return
        self._err = err
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._event.set()

        children, self._children = self._children, set()
        for child in children:
            child._cancel(err)
        if self._parent_scope is not None:
            self._parent_scope._children.discard(self)

    def _scope(self) -> Optional["_CancelContext"]:
        return self

    def __repr__(self) -> str:
        return f"{self._parent!r}.with_deadline({self._deadline!r})"


_BACKGROUND = Context()


def background() -> Context:
    """Return the empty root context."""
    return _BACKGROUND
