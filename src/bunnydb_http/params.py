"""
Statement parameters and statement descriptors.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .value import Value


@dataclass(frozen=True)
class Params:
    """
    Positional or named statement parameters.

    Named pairs keep their insertion order and duplicate names are all sent.

    Attributes:
        values: Positional values (empty for named parameters)
        pairs: Named (name, value) pairs (empty for positional parameters)
        is_named: Whether the parameters are named
    """

    values: tuple[Value, ...] = ()
    pairs: tuple[tuple[str, Value], ...] = ()
    is_named: bool = False

    @classmethod
    def empty(cls) -> Params:
        """No parameters."""
        return cls()

    @classmethod
    def positional(cls, values: Iterable[Any]) -> Params:
        """Create positional parameters, converting plain Python values."""
        return cls(values=tuple(Value.from_python(v) for v in values))

    @classmethod
    def named(cls, pairs: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Params:
        """Create named parameters from a mapping or an iterable of pairs."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(
            pairs=tuple((str(name), Value.from_python(v)) for name, v in items),
            is_named=True,
        )

    @classmethod
    def coerce(cls, params: Any) -> Params:
        """
        Build Params from whatever a caller passed to ``query``/``execute``.

        None means no parameters, a mapping means named parameters and any
        other iterable means positional parameters.
        """
        if params is None:
            return cls.empty()
        if isinstance(params, Params):
            return params
        if isinstance(params, Mapping):
            return cls.named(params)
        if isinstance(params, (str, bytes, bytearray, Value)):
            raise TypeError(
                f"Parameters must be a sequence or mapping, got {type(params).__name__}; "
                "wrap a single value in a list"
            )
        return cls.positional(params)

    def __len__(self) -> int:
        return len(self.pairs) if self.is_named else len(self.values)


@dataclass(frozen=True)
class Statement:
    """
    One SQL statement to run in a pipeline.

    Attributes:
        sql: SQL text, sent verbatim
        params: Statement parameters
        want_rows: Decode the result as rows (QueryResult) instead of ExecResult
    """

    sql: str
    params: Params = field(default_factory=Params)
    want_rows: bool = False

    @classmethod
    def query(cls, sql: str, params: Any = None) -> Statement:
        """Create a statement whose result is decoded as rows."""
        return cls(sql=sql, params=Params.coerce(params), want_rows=True)

    @classmethod
    def execute(cls, sql: str, params: Any = None) -> Statement:
        """Create a statement whose result is decoded as execution metadata."""
        return cls(sql=sql, params=Params.coerce(params), want_rows=False)
