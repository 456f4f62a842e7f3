"""Sentinel for partial updates.

UNSET marks a field the caller did not supply, as opposed to None, which
explicitly clears the field.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Final


class Unset:
    """Type of the UNSET sentinel (single instance)."""

    _instance: Unset | None = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = Unset()


def supplied_fields(obj: Any, *, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
    """Return {name: value} for dataclass fields of obj that are not UNSET."""
    return {
        f.name: getattr(obj, f.name)
        for f in fields(obj)
        if f.name not in exclude and getattr(obj, f.name) is not UNSET
    }
