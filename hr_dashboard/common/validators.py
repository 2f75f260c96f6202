"""Shared pydantic field-validator helpers."""

from typing import Any


def blank_to_none(value: Any) -> Any:
    """Strip strings; an empty result becomes ``None``."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
