"""Scoped bindings: resolving, swapping in and restoring named global cells.

A binding is a module-level (or class-level) attribute addressed by its fully
qualified dotted name, e.g. ``"myapp.settings.request_id"``. While a frame
runs, each binding visible from its node holds the value stored on the
innermost node that declares it; when the frame exits the value is copied
back into that node and the attribute is restored.
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any

from dynframe.errors import BindingError
from dynframe.types import ContextNode
from dynframe.utils import DEBUG_FRAMES

logger = logging.getLogger(__name__)

# Marks an attribute that did not exist before it was bound.
_ABSENT: Any = object()


@dataclass(frozen=True)
class BindingRef:
    """Reference to a globally addressable attribute by qualified name."""

    qualified_name: str

    @property
    def attribute(self) -> str:
        return self.qualified_name.rpartition(".")[2]

    def owner(self) -> object:
        """Return the module or class object that holds the attribute.

        The longest importable dotted prefix is taken as the module; any
        remaining segments are walked with ``getattr``.
        """
        parts = self.qualified_name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            module = sys.modules.get(module_name)
            if module is None:
                try:
                    module = importlib.import_module(module_name)
                except ImportError:
                    continue
            target: object = module
            for part in parts[split:-1]:
                try:
                    target = getattr(target, part)
                except AttributeError as exc:
                    raise BindingError(
                        self.qualified_name, f"{module_name} has no attribute path {part!r}"
                    ) from exc
            return target
        raise BindingError(self.qualified_name, "no importable module prefix")

    def _held_by(self, target: object) -> bool:
        # Classes may only inherit the attribute; restoring must not copy it down.
        if isinstance(target, type):
            return self.attribute in vars(target)
        return hasattr(target, self.attribute)

    def read(self) -> Any:
        return getattr(self.owner(), self.attribute, _ABSENT)

    def snapshot(self) -> Any:
        """Return the value to restore later, or the absent marker when the
        owner does not hold the attribute itself."""
        target = self.owner()
        if not self._held_by(target):
            return _ABSENT
        return getattr(target, self.attribute)

    def write(self, value: Any) -> None:
        target = self.owner()
        if value is _ABSENT:
            if self._held_by(target):
                delattr(target, self.attribute)
            return
        setattr(target, self.attribute, value)


def resolve_bindings(node: ContextNode | None) -> dict[str, ContextNode]:
    """Map every binding name visible from ``node`` to the node that owns it.

    The walk goes outward from ``node``; the first (innermost) declaration of a
    name wins, so inner declarations shadow outer ones.
    """
    owners: dict[str, ContextNode] = {}
    if node is None:
        return owners
    for frame in node.chain():
        if frame.bindings is None:
            continue
        for name in frame.bindings:
            owners.setdefault(name, frame)
    return owners


@contextmanager
def scoped_value(ref: BindingRef | str, value: Any) -> Iterator[BindingRef]:
    """Give ``ref`` the value ``value`` for the duration of the block.

    The previous value is restored on every exit path; an attribute that did
    not exist before is deleted again.
    """
    if isinstance(ref, str):
        ref = BindingRef(ref)
    saved = ref.snapshot()
    ref.write(value)
    try:
        yield ref
    finally:
        ref.write(saved)


@contextmanager
def _bound_from(ref: BindingRef, storage: dict[str, Any]) -> Iterator[None]:
    with scoped_value(ref, storage[ref.qualified_name]):
        try:
            yield
        finally:
            # Keep mutations made during the call for the next invocation; a
            # deleted attribute is stored as unset.
            value = ref.read()
            storage[ref.qualified_name] = None if value is _ABSENT else value


@contextmanager
def install_bindings(node: ContextNode) -> Iterator[dict[str, ContextNode]]:
    """Swap in every binding visible from ``node`` until the block exits.

    Restores run innermost-first, after the stored values have been updated,
    whether the block returns or raises.
    """
    owners = resolve_bindings(node)
    if not owners:
        yield owners
        return

    with ExitStack() as stack:
        for name, owner in owners.items():
            if owner.bindings is None:
                raise BindingError(name, f"frame {owner.name!r} declares no bindings")
            stack.enter_context(_bound_from(BindingRef(name), owner.bindings))
            if DEBUG_FRAMES:
                logger.debug("Bound %s from frame %r", name, owner.name)
        yield owners


__all__ = [
    "BindingRef",
    "install_bindings",
    "resolve_bindings",
    "scoped_value",
]
