"""
SQL value model.

A ``Value`` is one of null, integer, float, text or base64 blob. Values are
immutable and built through the class-method constructors.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class ValueType(str, Enum):
    """Type tag of a SQL value."""

    NULL = "null"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BLOB = "blob"


@dataclass(frozen=True)
class Value:
    """
    A single SQL value.

    Attributes:
        type: The value's type tag
        value: The native payload (None, int, float, str, or the base64 text of a blob)
    """

    type: ValueType
    value: int | float | str | None = None

    @classmethod
    def null(cls) -> "Value":
        """Create a NULL value."""
        return cls(ValueType.NULL)

    @classmethod
    def integer(cls, value: int) -> "Value":
        """Create a 64-bit integer value."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"integer value must be an int, got {type(value).__name__}")
        if not I64_MIN <= value <= I64_MAX:
            raise ValueError(f"integer {value} is outside the signed 64-bit range")
        return cls(ValueType.INTEGER, int(value))

    @classmethod
    def float(cls, value: float) -> "Value":
        """Create a float value. Non-finite floats are rejected when encoded."""
        return cls(ValueType.FLOAT, float(value))

    @classmethod
    def text(cls, value: str) -> "Value":
        """Create a text value."""
        return cls(ValueType.TEXT, value)

    @classmethod
    def blob_base64(cls, value: str) -> "Value":
        """Create a blob value from already base64-encoded text."""
        return cls(ValueType.BLOB, value)

    @classmethod
    def blob(cls, data: bytes | bytearray | memoryview) -> "Value":
        """Create a blob value from raw bytes."""
        return cls(ValueType.BLOB, base64.b64encode(bytes(data)).decode("ascii"))

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """
        Convert a plain Python object to a Value.

        Supports None, bool (stored as 0/1), int, float, str, bytes-like objects
        and existing Value instances.

        Raises:
            TypeError: If the object has no SQL value equivalent
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.integer(int(obj))
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.float(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(obj)
        raise TypeError(f"Cannot convert {type(obj).__name__} to a SQL value")

    @property
    def is_null(self) -> bool:
        """Check if this is a NULL value."""
        return self.type is ValueType.NULL

    def to_python(self) -> int | float | str | None:
        """Return the native payload."""
        return self.value

    def as_bytes(self) -> bytes:
        """
        Decode a blob value to raw bytes.

        Raises:
            TypeError: If the value is not a blob
        """
        if self.type is not ValueType.BLOB:
            raise TypeError(f"Value of type '{self.type.value}' is not a blob")
        return base64.b64decode(str(self.value))
