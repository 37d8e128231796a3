"""
dynframe - Preserve error handlers and scoped bindings across callbacks.

Closures keep their lexical environment but lose their dynamic one: the error
handlers and temporarily rebound globals that were active when the callback
was created. A frame captures that environment and reinstates it whenever the
callback runs, no matter which event loop, timer or thread invokes it.

Example:
    >>> from dynframe import frame
    >>>
    >>> def report(trace):
    ...     print(trace)
    >>>
    >>> callbacks = []
    >>> frame(lambda: callbacks.append(frame(lambda: 1 / 0, name="worker")),
    ...       name="base", on_error=report)()
    >>> callbacks[0]()  # report() runs even though "base" returned long ago
"""

from dynframe.bindings import BindingRef, resolve_bindings, scoped_value
from dynframe.current import current_context, current_error
from dynframe.errors import (
    BindingError,
    ConfigError,
    FailureStage,
    FrameError,
    InvalidReuseError,
)
from dynframe.frame import Frame, FrameOptions, create_context, frame
from dynframe.handlers import log_trace
from dynframe.registry import FrameRegistry, default_registry, is_context
from dynframe.trace import TRACE_BANNER, frame_names, generate_trace
from dynframe.types import ANONYMOUS_FRAME_NAME, ContextNode

__version__ = "0.1.0"

__all__ = [
    "ANONYMOUS_FRAME_NAME",
    "BindingError",
    "BindingRef",
    "ConfigError",
    "ContextNode",
    "FailureStage",
    "Frame",
    "FrameError",
    "FrameOptions",
    "FrameRegistry",
    "InvalidReuseError",
    "TRACE_BANNER",
    "create_context",
    "current_context",
    "current_error",
    "default_registry",
    "frame",
    "frame_names",
    "generate_trace",
    "is_context",
    "log_trace",
    "resolve_bindings",
    "scoped_value",
]
