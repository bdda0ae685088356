"""
Conversion between the typed client model and wire models.

Integers and floats are encoded as decimal strings and parsed back on the
way in. Non-finite floats are rejected in both directions.
"""

import math
import re

from ..exceptions import DecodeError
from ..params import Params
from ..types import Col, ExecResult, QueryResult
from ..value import I64_MAX, I64_MIN, Value, ValueType
from .wire import (
    ExecuteResult,
    ExecuteStatement,
    NamedArg,
    WireBlob,
    WireFloat,
    WireInteger,
    WireNull,
    WireText,
    WireValue,
)

NAMED_PARAMETER_PREFIXES = (":", "@", "$")

_INTEGER_RE = re.compile(r"[+-]?0*([0-9]+)")

# Largest magnitude (2**63) has 19 digits
_I64_MAX_DIGITS = 19

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def encode_value(value: Value) -> WireValue:
    """
    Encode a value for the wire.

    Raises:
        DecodeError: If the value is a non-finite float
    """
    if value.type is ValueType.NULL:
        return WireNull()
    if value.type is ValueType.INTEGER:
        return WireInteger(value=str(value.value))
    if value.type is ValueType.FLOAT:
        number = float(value.value)  # type: ignore[arg-type]
        if not math.isfinite(number):
            raise DecodeError(f"non-finite float value '{number}' is unsupported")
        return WireFloat(value=repr(number))
    if value.type is ValueType.TEXT:
        return WireText(value=str(value.value))
    return WireBlob(base64=str(value.value))


def _parse_integer(raw: str) -> int:
    match = _INTEGER_RE.fullmatch(raw)
    if match is None:
        raise DecodeError(f"invalid integer value '{raw}': not a decimal integer")
    if len(match.group(1)) > _I64_MAX_DIGITS:
        raise DecodeError(f"invalid integer value '{raw}': out of signed 64-bit range")
    number = int(raw)
    if not I64_MIN <= number <= I64_MAX:
        raise DecodeError(f"invalid integer value '{raw}': out of signed 64-bit range")
    return number


def decode_value(wire_value: WireValue) -> Value:
    """
    Decode a wire value.

    Raises:
        DecodeError: If a numeric string cannot be parsed or a float is not finite
    """
    if isinstance(wire_value, WireNull):
        return Value.null()
    if isinstance(wire_value, WireInteger):
        return Value.integer(_parse_integer(wire_value.value))
    if isinstance(wire_value, WireFloat):
        raw = wire_value.value
        if isinstance(raw, str) and not _FLOAT_RE.fullmatch(raw):
            raise DecodeError(f"invalid float value '{raw}': not a decimal number")
        number = float(raw)
        if not math.isfinite(number):
            raise DecodeError(f"non-finite float value '{raw}' is unsupported")
        return Value.float(number)
    if isinstance(wire_value, WireText):
        return Value.text(wire_value.value)
    return Value.blob_base64(wire_value.base64)


def normalize_named_parameter_name(name: str) -> str:
    """
    Strip one leading ``:``, ``@`` or ``$`` from a parameter name.

    Raises:
        DecodeError: If nothing is left of the name
    """
    normalized = name[1:] if name.startswith(NAMED_PARAMETER_PREFIXES) else name
    if not normalized:
        raise DecodeError("named parameter name cannot be empty")
    return normalized


def build_execute_statement(sql: str, params: Params, want_rows: bool) -> ExecuteStatement:
    """
    Build the wire statement for one SQL statement.

    Empty parameter lists are left out of the payload.

    Raises:
        DecodeError: If a value cannot be encoded or a parameter name is empty
    """
    if params.is_named:
        named_args = [
            NamedArg(name=normalize_named_parameter_name(name), value=encode_value(value))
            for name, value in params.pairs
        ]
        return ExecuteStatement(sql=sql, named_args=named_args or None, want_rows=want_rows)

    args = [encode_value(value) for value in params.values]
    return ExecuteStatement(sql=sql, args=args or None, want_rows=want_rows)


def decode_query_result(result: ExecuteResult) -> QueryResult:
    """
    Decode an execute result into rows.

    Raises:
        DecodeError: If a value cannot be decoded or a row width differs from the column count
    """
    cols = [Col(name=col.name, decltype=col.decltype) for col in result.cols]
    rows: list[list[Value]] = []
    for index, row in enumerate(result.rows):
        if len(row) != len(cols):
            raise DecodeError(f"row {index} has {len(row)} values but result has {len(cols)} columns")
        rows.append([decode_value(value) for value in row])

    return QueryResult(
        cols=cols,
        rows=rows,
        replication_index=result.replication_index,
        rows_read=result.rows_read,
        rows_written=result.rows_written,
        query_duration_ms=result.query_duration_ms,
    )


def decode_exec_result(result: ExecuteResult) -> ExecResult:
    """
    Decode an execute result into execution metadata.

    Raises:
        DecodeError: If ``last_insert_rowid`` is not a valid integer string
    """
    last_insert_rowid = None
    if result.last_insert_rowid is not None:
        try:
            last_insert_rowid = _parse_integer(result.last_insert_rowid)
        except DecodeError as e:
            raise DecodeError(f"invalid last_insert_rowid '{result.last_insert_rowid}'") from e

    return ExecResult(
        affected_row_count=result.affected_row_count,
        last_insert_rowid=last_insert_rowid,
        replication_index=result.replication_index,
        rows_read=result.rows_read,
        rows_written=result.rows_written,
    )
