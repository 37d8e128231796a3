"""Runtime validators for frame construction options."""

from __future__ import annotations

from dynframe.errors import ConfigError


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_str(value: object, *, name: str) -> None:
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be str, got {_type_name(value)}")


def ensure_optional_str(value: object | None, *, name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{name} must be str or None, got {_type_name(value)}")


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise ConfigError(f"{name} must be callable, got {_type_name(value)}")


def ensure_optional_callable(value: object | None, *, name: str) -> None:
    if value is not None and not callable(value):
        raise ConfigError(f"{name} must be callable or None, got {_type_name(value)}")


def ensure_qualified_name(value: object, *, name: str) -> None:
    ensure_str(value, name=name)
    parts = value.split(".")  # type: ignore[union-attr]
    if len(parts) < 2 or not all(part.isidentifier() for part in parts):
        raise ConfigError(
            f"{name} must be a fully qualified 'module.attribute' name, got {value!r}"
        )
