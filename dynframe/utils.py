"""
Utility functions for the dynframe library.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

# Environment variable to control debug mode
DEBUG_FRAMES = os.environ.get("DYNFRAME_DEBUG", "").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class OriginLocation:
    """Source location where a frame was constructed."""

    filename: str
    line: int
    function: str | None = None

    def format(self) -> str:
        if self.function:
            return f"{self.filename}:{self.line} ({self.function})"
        return f"{self.filename}:{self.line}"


def capture_origin(skip_frames: int = 2) -> Optional[OriginLocation]:
    """
    Capture the source location of the code constructing a frame.

    Args:
        skip_frames: Number of frames to skip (default 2 to skip this function and caller)

    Returns:
        OriginLocation of the caller, or None when stack introspection is unavailable.
        The calling function name is only recorded when DEBUG_FRAMES is enabled.
    """
    try:
        frame = sys._getframe(skip_frames)
    except (AttributeError, ValueError):
        # sys._getframe() is missing on some implementations, or the stack is too shallow
        return None

    return OriginLocation(
        filename=frame.f_code.co_filename,
        line=frame.f_lineno,
        function=frame.f_code.co_name if DEBUG_FRAMES else None,
    )


__all__ = [
    "DEBUG_FRAMES",
    "OriginLocation",
    "capture_origin",
]
