"""Core types for the dynframe context tree."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

ANONYMOUS_FRAME_NAME = "ANONYMOUS FRAME"

ErrorHandler: TypeAlias = Callable[[str], Any]


@dataclass(frozen=True, eq=False)
class ContextNode:
    """One dynamic scope in the frame tree.

    Nodes only point at their parent, so the tree cannot cycle and a child
    keeps every ancestor alive while ancestors never reference children.

    Attributes:
        name: Display name, ``"<file>:<line> - <label>"``.
        parent: The node that was current when this one was constructed.
        handler: Called with the trace string when an error surfaces here.
        bindings: Stored values of the scoped cells this node rebinds, keyed by
            qualified name. ``None`` when the node introduces no bindings. Only
            the values of this dict change after construction.
    """

    name: str
    parent: ContextNode | None = None
    handler: ErrorHandler | None = field(default=None, repr=False)
    bindings: dict[str, Any] | None = field(default=None, repr=False)

    def chain(self) -> Iterator[ContextNode]:
        """Yield this node, then each ancestor up to the root."""
        node: ContextNode | None = self
        while node is not None:
            yield node
            node = node.parent

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.chain()) - 1

    def owns(self, qualified_name: str) -> bool:
        return self.bindings is not None and qualified_name in self.bindings

    def __repr__(self) -> str:
        return f"ContextNode(name={self.name!r}, depth={self.depth})"


__all__ = [
    "ANONYMOUS_FRAME_NAME",
    "ContextNode",
    "ErrorHandler",
]
