"""
Frame wrappers for the dynframe system.

A :class:`Frame` wraps a callback together with the dynamic environment that
was current when the frame was built: the chain of error handlers and the
scoped bindings of every enclosing frame. Whoever calls the frame later (an
event loop, a timer, a thread pool) gets that environment reinstated around
the callback.
"""

from __future__ import annotations

import functools
import logging
import types
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, ParamSpec, TypeVar

from frozendict import frozendict

from dynframe._validators import (
    ensure_callable,
    ensure_optional_callable,
    ensure_optional_str,
    ensure_qualified_name,
)
from dynframe.bindings import install_bindings
from dynframe.current import current_context, handling, installed
from dynframe.errors import ConfigError, FailureStage, InvalidReuseError
from dynframe.registry import FrameRegistry, default_registry
from dynframe.trace import describe_error, generate_trace
from dynframe.types import ANONYMOUS_FRAME_NAME, ContextNode, ErrorHandler
from dynframe.utils import DEBUG_FRAMES, OriginLocation, capture_origin

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

FRAME_OPTION_KEYS = ("name", "body", "on_error", "bindings", "reuse")


def _normalize_bindings(value: object) -> frozendict[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, str):
        declared: dict[str, Any] = {value: None}
    elif isinstance(value, Mapping):
        declared = dict(value)
    elif isinstance(value, Iterable):
        declared = dict.fromkeys(value)
    else:
        raise ConfigError(
            f"bindings must be a name, an iterable of names or a mapping, got {type(value).__name__}"
        )
    for name in declared:
        ensure_qualified_name(name, name="bindings entry")
    return frozendict(declared)


@dataclass(frozen=True)
class FrameOptions:
    """Validated construction options for a :class:`Frame`.

    ``bindings`` is normalised to a frozendict of initial stored values; names
    given without a value start out as ``None``.
    """

    body: Callable[..., Any] | None = None
    name: str | None = None
    on_error: ErrorHandler | None = None
    bindings: Any = None
    reuse: Frame | None = None

    def __post_init__(self) -> None:
        if self.body is None:
            raise ConfigError("frame needs a 'body' callback")
        ensure_callable(self.body, name="body")
        ensure_optional_str(self.name, name="name")
        ensure_optional_callable(self.on_error, name="on_error")
        if self.reuse is not None:
            if self.on_error is not None:
                raise InvalidReuseError("'on_error' cannot be combined with 'reuse'", self.reuse)
            if self.bindings is not None:
                raise InvalidReuseError("'bindings' cannot be combined with 'reuse'", self.reuse)
        object.__setattr__(self, "bindings", _normalize_bindings(self.bindings))

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> FrameOptions:
        for key, value in options.items():
            if key not in FRAME_OPTION_KEYS:
                raise ConfigError(f"Unknown frame option: {key}")
            if value is None:
                raise ConfigError(f"value missing for key {key}")
        return cls(**options)  # type: ignore[arg-type]


def _assemble_name(label: str | None, origin: OriginLocation | None) -> str:
    label = label or ANONYMOUS_FRAME_NAME
    if origin is None:
        return label
    return f"{origin.format()} - {label}"


def _raise_preserving_context(error: Exception) -> NoReturn:
    """Raise ``error`` again without letting the raise rewrite its ``__context__``."""
    context = error.__context__
    try:
        raise error
    except Exception:
        error.__context__ = context
        raise


def _walk_handlers(node: ContextNode, trace: str, error: Exception) -> None:
    """Offer ``error`` to each handler from ``node`` outward.

    Each handler runs while its error is the exception being handled, so a
    bare ``raise`` inside it re-raises that error. A handler that returns
    absorbs the error; a handler that raises hands its own error to the next
    handler out, with the same trace.
    """
    for scope in node.chain():
        handler = scope.handler
        if handler is None:
            continue
        with handling(error):
            try:
                try:
                    _raise_preserving_context(error)
                except Exception:
                    handler(trace)
            except Exception as handler_error:
                if DEBUG_FRAMES:
                    logger.debug(
                        "%s error in %r: %s",
                        FailureStage.HANDLER.value,
                        scope.name,
                        describe_error(handler_error),
                    )
                error = handler_error
                continue
        logger.debug("Frame %r handled %s", scope.name, describe_error(error))
        return None

    logger.debug("%s error escapes frame chain: %s", FailureStage.UNHANDLED.value, describe_error(error))
    _raise_preserving_context(error)


class Frame(Generic[P, T]):
    """Callable that re-enters a saved dynamic context around ``body``.

    Calling the frame installs its context node as current, swaps in the
    scoped bindings visible from that node, and runs ``body``. If ``body``
    raises, the bindings are rolled back and the error is offered to each
    ``on_error`` handler from this frame outward. The call returns ``None``
    when a handler absorbs the error and re-raises when none does.
    """

    def __init__(
        self,
        options: FrameOptions,
        *,
        origin: OriginLocation | None = None,
        registry: FrameRegistry | None = None,
    ) -> None:
        registry = registry if registry is not None else default_registry()
        if options.reuse is not None:
            node = registry.lookup(options.reuse)
            if node is None:
                raise InvalidReuseError("target is not a live frame", options.reuse)
            if options.name is not None:
                logger.debug("Ignoring name %r for frame reusing %r", options.name, node.name)
        else:
            node = ContextNode(
                name=_assemble_name(options.name, origin),
                parent=current_context(),
                handler=options.on_error,
                bindings=dict(options.bindings) if options.bindings is not None else None,
            )

        self._node = node
        self._body: Callable[P, T] = options.body  # type: ignore[assignment]
        self._registry = registry
        functools.update_wrapper(self, self._body, updated=())
        registry.register(self, node)

    @property
    def node(self) -> ContextNode:
        return self._node

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def body(self) -> Callable[P, T]:
        return self._body

    def release(self) -> bool:
        """Remove this frame from the live registry ahead of garbage collection."""
        return self._registry.unregister(self)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> T | None:
        node = self._node
        with installed(node):
            try:
                with install_bindings(node):
                    return self._body(*args, **kwargs)
            except Exception as exc:
                if DEBUG_FRAMES:
                    logger.debug(
                        "%s error in %r: %s", FailureStage.BODY.value, node.name, describe_error(exc)
                    )
                error = exc
            # Handlers run outside the body's except block.
            return _walk_handlers(node, generate_trace(node, error), error)

    def __repr__(self) -> str:
        return f"<Frame {self._node.name!r}>"


def frame(
    body: Callable[P, T] | None = None,
    *,
    name: str | None = None,
    on_error: ErrorHandler | None = None,
    bindings: Mapping[str, Any] | Iterable[str] | str | None = None,
    reuse: Frame | None = None,
) -> Frame[P, T]:
    """Wrap ``body`` so it runs in the dynamic context current right now.

    Example:
        >>> def on_error(trace):
        ...     print("caught:", trace.splitlines()[0])
        >>> callback = None
        >>> def setup():
        ...     global callback
        ...     callback = frame(lambda: 1 / 0, name="divide")
        >>> frame(setup, name="base", on_error=on_error)()
        >>> callback()  # the base handler still applies
        caught: ZeroDivisionError: division by zero
    """
    options = FrameOptions(body=body, name=name, on_error=on_error, bindings=bindings, reuse=reuse)
    return Frame(options, origin=capture_origin(skip_frames=2))


def create_context(options: Mapping[str, object]) -> Frame[..., Any]:
    """Build a frame from an option mapping.

    Recognised keys are ``name``, ``body``, ``on_error``, ``bindings`` and
    ``reuse``; unknown keys and keys mapped to ``None`` raise ConfigError.
    """
    return Frame(FrameOptions.from_mapping(options), origin=capture_origin(skip_frames=2))


__all__ = [
    "FRAME_OPTION_KEYS",
    "Frame",
    "FrameOptions",
    "create_context",
    "frame",
]
