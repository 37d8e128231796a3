"""Tests for the live-frame registry and frame reuse."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from dynframe import (
    ConfigError,
    Frame,
    FrameOptions,
    InvalidReuseError,
    current_context,
    default_registry,
    frame,
    is_context,
)


class _Unhashable:
    __hash__ = None  # type: ignore[assignment]


def test_frames_are_contexts() -> None:
    wrapped = frame(lambda: None)

    assert is_context(wrapped)
    assert wrapped in default_registry()


@pytest.mark.parametrize(
    "value",
    [None, 42, "text", [], {}, object(), _Unhashable(), lambda: None, print],
)
def test_foreign_values_are_not_contexts(value: Any) -> None:
    assert not is_context(value)


def test_dropping_last_reference_removes_entry(registry, make_frame, collect) -> None:
    wrapped = make_frame(lambda: None)
    assert len(registry) == 1

    del wrapped
    collect()

    assert len(registry) == 0


def test_descendant_frames_are_released_independently(registry, collect) -> None:
    children: list[Any] = []

    def body() -> None:
        children.append(Frame(FrameOptions(body=lambda: None), registry=registry))

    parent = Frame(FrameOptions(body=body, name="parent"), registry=registry)
    parent()
    parent_node = parent.node
    assert len(registry) == 2

    del parent
    collect()

    assert len(registry) == 1
    # The child's node still holds the parent node alive.
    assert children[0].node.parent is parent_node

    children.clear()
    collect()
    assert len(registry) == 0


def test_release_logs_on_last_reference(caplog, registry, make_frame, collect) -> None:
    caplog.set_level(logging.DEBUG, logger="dynframe.registry")
    wrapped = make_frame(lambda: None, name="short-lived")

    del wrapped
    collect()

    assert any(
        "Frame released" in message and "short-lived" in message for message in caplog.messages
    )


def test_explicit_release(registry, make_frame) -> None:
    wrapped = make_frame(lambda: "still callable")

    assert wrapped.release() is True
    assert wrapped not in registry
    assert wrapped.release() is False
    assert wrapped() == "still callable"


def test_released_frame_cannot_be_reused() -> None:
    wrapped = frame(lambda: None)
    wrapped.release()

    with pytest.raises(InvalidReuseError):
        frame(lambda: None, reuse=wrapped)


def test_reuse_shares_existing_node() -> None:
    seen: list[Any] = []
    original = frame(lambda: None, name="original")

    reused = frame(lambda: seen.append(current_context()), reuse=original)
    reused()

    assert reused.node is original.node
    assert is_context(reused)
    assert seen == [original.node]


def test_reused_frame_errors_reach_original_handler() -> None:
    traces: list[str] = []
    original = frame(lambda: None, name="original", on_error=traces.append)

    def body() -> None:
        raise ValueError("late failure")

    assert frame(body, reuse=original)() is None
    assert traces[0].startswith("ValueError: late failure")
    assert traces[0].splitlines()[2].endswith(" - original")


def test_reuse_ignores_name(registry, make_frame) -> None:
    original = make_frame(lambda: None, name="original")

    reused = make_frame(lambda: None, name="other", reuse=original)

    assert reused.name == original.name


@pytest.mark.parametrize("target", [lambda: None, 42, None.__class__, _Unhashable()])
def test_reuse_of_non_frame_fails_without_allocating(registry, make_frame, target) -> None:
    with pytest.raises(InvalidReuseError) as exc_info:
        make_frame(lambda: None, reuse=target)

    assert isinstance(exc_info.value, ConfigError)
    assert exc_info.value.target is target
    assert len(registry) == 0


def test_reuse_rejects_handler_and_bindings() -> None:
    original = frame(lambda: None)

    with pytest.raises(InvalidReuseError):
        frame(lambda: None, reuse=original, on_error=lambda trace: None)
    with pytest.raises(InvalidReuseError):
        frame(lambda: None, reuse=original, bindings=["pkg.value"])


def test_reuse_from_other_registry_is_not_live(registry, make_frame) -> None:
    foreign = frame(lambda: None)

    with pytest.raises(InvalidReuseError):
        make_frame(lambda: None, reuse=foreign)


def test_live_frames_lists_registered_frames(registry, make_frame, collect) -> None:
    first = make_frame(lambda: None, name="first")
    second = make_frame(lambda: None, name="second")

    assert set(registry.live_frames()) == {first, second}

    second.release()
    assert registry.live_frames() == [first]

    del first
    collect()
    assert registry.live_frames() == []
