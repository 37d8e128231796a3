"""The current-context slot and other ambient state.

Each thread and each asyncio task sees its own value, so frames invoked from
independently scheduled lanes never observe each other's context.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from dynframe.types import ContextNode

_current_context: ContextVar[ContextNode | None] = ContextVar(
    "dynframe_current_context", default=None
)
_current_error: ContextVar[BaseException | None] = ContextVar(
    "dynframe_current_error", default=None
)


def current_context() -> ContextNode | None:
    """Return the innermost installed context, or ``None`` outside any frame."""
    return _current_context.get()


def current_error() -> BaseException | None:
    """Return the error being processed by the running ``on_error`` handler."""
    return _current_error.get()


@contextmanager
def installed(node: ContextNode | None) -> Iterator[ContextNode | None]:
    token = _current_context.set(node)
    try:
        yield node
    finally:
        _current_context.reset(token)


@contextmanager
def handling(error: BaseException) -> Iterator[BaseException]:
    token = _current_error.set(error)
    try:
        yield error
    finally:
        _current_error.reset(token)


__all__ = [
    "current_context",
    "current_error",
    "handling",
    "installed",
]
