"""Weak registry of live frames.

The registry answers "is this callable already one of ours?" without keeping
anything alive: entries are keyed weakly on the frame and disappear as soon
as the last reference to the frame is dropped.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING

from dynframe.types import ContextNode

if TYPE_CHECKING:
    from dynframe.frame import Frame

logger = logging.getLogger(__name__)


def _log_release(name: str) -> None:
    logger.debug("Frame released: %s", name)


class FrameRegistry:
    """Maps each live :class:`~dynframe.frame.Frame` to its context node."""

    def __init__(self) -> None:
        self._frames: weakref.WeakKeyDictionary[Frame, ContextNode] = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def register(self, frame: Frame, node: ContextNode) -> None:
        with self._lock:
            self._frames[frame] = node
        # Fires when the frame's last reference goes away, same moment the entry drops.
        weakref.finalize(frame, _log_release, node.name).atexit = False
        logger.debug("Frame registered: %s", node.name)

    def unregister(self, frame: Frame) -> bool:
        """Drop ``frame`` from the registry; return whether it was present."""
        with self._lock:
            node = self._frames.pop(frame, None)
        if node is None:
            return False
        logger.debug("Frame unregistered: %s", node.name)
        return True

    def lookup(self, value: object) -> ContextNode | None:
        """Return the node of ``value`` if it is a live frame, else ``None``."""
        try:
            with self._lock:
                return self._frames.get(value)  # type: ignore[arg-type]
        except TypeError:
            # Not weak-referenceable or not hashable: cannot be a frame.
            return None

    def live_frames(self) -> list[Frame]:
        with self._lock:
            return list(self._frames.keys())

    def __contains__(self, value: object) -> bool:
        return self.lookup(value) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)


_REGISTRY = FrameRegistry()


def default_registry() -> FrameRegistry:
    return _REGISTRY


def is_context(value: object) -> bool:
    """Return ``True`` iff ``value`` is a live frame produced by this library."""
    return value in _REGISTRY


__all__ = [
    "FrameRegistry",
    "default_registry",
    "is_context",
]
