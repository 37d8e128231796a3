"""Rendering of frame stack-traces."""

from __future__ import annotations

import traceback

from dynframe.types import ContextNode

TRACE_BANNER = "----- dynframe stack-trace -----"


def describe_error(error: BaseException) -> str:
    """Return the textual form of ``error``, e.g. ``"KeyError: 'x'"``.

    Only the final ``<type>: <message>`` entry is kept: the source and caret
    lines of a SyntaxError and any ``__notes__`` are left out.
    """
    summary = traceback.TracebackException(type(error), error, None, compact=True)
    summary.__notes__ = None
    entries = list(summary.format_exception_only())
    if not entries:
        return type(error).__name__
    return entries[-1].rstrip("\n")


def frame_names(node: ContextNode | None) -> tuple[str, ...]:
    """Names of ``node`` and its ancestors, most-nested first."""
    if node is None:
        return ()
    return tuple(frame.name for frame in node.chain())


def generate_trace(node: ContextNode | None, error: BaseException) -> str:
    """Render ``error`` and the frame chain starting at ``node``.

    The result is the error text, a banner line, then one frame name per
    line, most-nested first. Every line, including the last, ends in a newline.
    """
    lines = [describe_error(error), TRACE_BANNER, *frame_names(node)]
    return "".join(f"{line}\n" for line in lines)


__all__ = [
    "TRACE_BANNER",
    "describe_error",
    "frame_names",
    "generate_trace",
]
