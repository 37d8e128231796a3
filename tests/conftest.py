"""
Shared fixtures for dynframe tests.
"""

import gc
from collections.abc import Callable
from typing import Any

import pytest

from dynframe.frame import Frame, FrameOptions
from dynframe.registry import FrameRegistry


@pytest.fixture
def registry() -> FrameRegistry:
    """A registry private to one test, so live-frame counts are exact."""
    return FrameRegistry()


@pytest.fixture
def make_frame(registry: FrameRegistry) -> Callable[..., Frame]:
    """Build frames registered in the private ``registry`` fixture."""

    def factory(body: Callable[..., Any], **options: Any) -> Frame:
        return Frame(FrameOptions(body=body, **options), registry=registry)

    return factory


@pytest.fixture
def collect() -> Callable[[], None]:
    """Force a collection; CPython already frees frames on last release."""
    return gc.collect
