"""Error types raised by dynframe itself."""

from __future__ import annotations

from enum import Enum
from typing import Any


class FrameError(Exception):
    """Base class for errors raised by the dynframe engine."""


class ConfigError(FrameError, ValueError):
    """Raised synchronously when frame construction options are malformed."""


class InvalidReuseError(ConfigError):
    """Raised when ``reuse`` does not name a live frame or is combined with
    options that only make sense for a fresh context."""

    def __init__(self, reason: str, target: Any = None) -> None:
        self.target = target
        super().__init__(
            f"Cannot reuse frame: {reason}\n"
            "Hint: `reuse` accepts a live Frame and must not be combined with "
            "`on_error` or `bindings`."
        )


class BindingError(FrameError, LookupError):
    """Raised when a scoped binding cannot be located at invocation time."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Cannot bind {name!r}: {reason}")


class FailureStage(Enum):
    """Stage an in-flight error has reached while a frame handles it."""

    BODY = "body"
    HANDLER = "handler"
    UNHANDLED = "unhandled"


__all__ = [
    "BindingError",
    "ConfigError",
    "FailureStage",
    "FrameError",
    "InvalidReuseError",
]
