"""
Row mapping helpers.

A ``Row`` is a read-only view pairing one result row with its columns so
values can be looked up by column name.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from .value import Value, ValueType

if TYPE_CHECKING:
    from .types import Col


class Row(Sequence[Value]):
    """View over one row of a QueryResult."""

    __slots__ = ("cols", "values")

    def __init__(self, cols: Sequence[Col], values: Sequence[Value]):
        self.cols = cols
        self.values = values

    def _index_of(self, name: str) -> int | None:
        lowered = name.lower()
        for i, col in enumerate(self.cols):
            if col.name.lower() == lowered:
                return i
        return None

    def get(self, name: str) -> Value | None:
        """Get a value by column name (case-insensitive, first match wins)."""
        idx = self._index_of(name)
        if idx is None or idx >= len(self.values):
            return None
        return self.values[idx]

    def _get_typed(self, name: str, value_type: ValueType) -> Any:
        value = self.get(name)
        if value is None or value.type is not value_type:
            return None
        return value.value

    def get_int(self, name: str) -> int | None:
        """Get an integer column, or None if missing or of another type."""
        return self._get_typed(name, ValueType.INTEGER)

    def get_float(self, name: str) -> float | None:
        """Get a float column, or None if missing or of another type."""
        return self._get_typed(name, ValueType.FLOAT)

    def get_text(self, name: str) -> str | None:
        """Get a text column, or None if missing or of another type."""
        return self._get_typed(name, ValueType.TEXT)

    def as_dict(self) -> dict[str, Any]:
        """Map column names to native Python values."""
        return {col.name: value.to_python() for col, value in zip(self.cols, self.values)}

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            value = self.get(key)
            if value is None:
                raise KeyError(key)
            return value
        return self.values[key]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def __repr__(self) -> str:
        return f"Row({self.as_dict()!r})"
