"""Tests for the value codec and statement builder."""

import math

import pytest

from bunnydb_http import Col, Params, Value
from bunnydb_http.exceptions import DecodeError
from bunnydb_http.protocol import codec
from bunnydb_http.protocol.wire import (
    ExecuteResult,
    WireBlob,
    WireCol,
    WireFloat,
    WireInteger,
    WireNull,
    WireText,
)


class TestEncodeValue:
    """Tests for encode_value."""

    def test_integer_as_decimal_string(self) -> None:
        """Large integers survive as strings."""
        assert codec.encode_value(Value.integer(2**63 - 1)) == WireInteger(value="9223372036854775807")

    def test_float_as_decimal_string(self) -> None:
        assert codec.encode_value(Value.float(1.25)) == WireFloat(value="1.25")

    def test_other_types(self) -> None:
        assert codec.encode_value(Value.null()) == WireNull()
        assert codec.encode_value(Value.text("Kit")) == WireText(value="Kit")
        assert codec.encode_value(Value.blob_base64("AQID")) == WireBlob(base64="AQID")

    @pytest.mark.parametrize("number", [math.nan, math.inf, -math.inf])
    def test_non_finite_float_rejected(self, number: float) -> None:
        with pytest.raises(DecodeError, match="non-finite"):
            codec.encode_value(Value.float(number))


class TestDecodeValue:
    """Tests for decode_value."""

    def test_integer(self) -> None:
        assert codec.decode_value(WireInteger(value="-42")) == Value.integer(-42)

    def test_integer_parse_error_names_value(self) -> None:
        with pytest.raises(DecodeError, match="'nope'"):
            codec.decode_value(WireInteger(value="nope"))

    def test_integer_rejects_loose_forms(self) -> None:
        for raw in ("1_000", " 1", "1.0", ""):
            with pytest.raises(DecodeError):
                codec.decode_value(WireInteger(value=raw))

    def test_integer_out_of_range(self) -> None:
        with pytest.raises(DecodeError, match="64-bit"):
            codec.decode_value(WireInteger(value="9223372036854775808"))

    @pytest.mark.parametrize("raw", ["9" * 5000, "-" + "1" * 5000, "1" * 20])
    def test_integer_huge_digit_string(self, raw: str) -> None:
        with pytest.raises(DecodeError, match="64-bit"):
            codec.decode_value(WireInteger(value=raw))

    def test_integer_leading_zeros(self) -> None:
        raw = "0" * 40 + "9223372036854775807"
        assert codec.decode_value(WireInteger(value=raw)) == Value.integer(2**63 - 1)
        assert codec.decode_value(WireInteger(value="-000")) == Value.integer(0)

    def test_float(self) -> None:
        assert codec.decode_value(WireFloat(value="2.5")) == Value.float(2.5)
        assert codec.decode_value(WireFloat(value="-1.5e-3")) == Value.float(-0.0015)
        assert codec.decode_value(WireFloat(value=".5")) == Value.float(0.5)

    def test_float_json_number(self) -> None:
        assert codec.decode_value(WireFloat(value=2.5)) == Value.float(2.5)

    @pytest.mark.parametrize("raw", ["x1", "1_5", " 2.5 ", "1.5\n", "", "1e", "0x10"])
    def test_float_parse_error(self, raw: str) -> None:
        with pytest.raises(DecodeError, match="invalid float value"):
            codec.decode_value(WireFloat(value=raw))

    @pytest.mark.parametrize("raw", ["inf", "-inf", "NaN", "1e999"])
    def test_non_finite_float_rejected(self, raw: str) -> None:
        with pytest.raises(DecodeError, match=f"non-finite float value '{raw}'"):
            codec.decode_value(WireFloat(value=raw))

    def test_text_and_blob(self) -> None:
        assert codec.decode_value(WireText(value="Kit")) == Value.text("Kit")
        assert codec.decode_value(WireBlob(base64="AQID")) == Value.blob_base64("AQID")
        assert codec.decode_value(WireNull()) == Value.null()

    @pytest.mark.parametrize("number", [0.1, -1e-300, 1e300, 1 / 3, 123456789.123456789, 2.0**53 + 2])
    def test_float_round_trip(self, number: float) -> None:
        assert codec.decode_value(codec.encode_value(Value.float(number))) == Value.float(number)


class TestNamedParameterName:
    """Tests for normalize_named_parameter_name."""

    @pytest.mark.parametrize("name", [":name", "@name", "$name", "name"])
    def test_strips_one_prefix(self, name: str) -> None:
        assert codec.normalize_named_parameter_name(name) == "name"

    def test_strips_only_one_character(self) -> None:
        assert codec.normalize_named_parameter_name("::name") == ":name"
        assert codec.normalize_named_parameter_name("$@x") == "@x"

    @pytest.mark.parametrize("name", ["", ":", "@", "$"])
    def test_empty_name_rejected(self, name: str) -> None:
        with pytest.raises(DecodeError, match="cannot be empty"):
            codec.normalize_named_parameter_name(name)


class TestBuildExecuteStatement:
    """Tests for build_execute_statement."""

    def test_positional(self) -> None:
        stmt = codec.build_execute_statement("SELECT ?", Params.positional([Value.integer(1)]), True)
        assert stmt.args == [WireInteger(value="1")]
        assert stmt.named_args is None
        assert stmt.want_rows

    def test_named_strips_prefix(self) -> None:
        stmt = codec.build_execute_statement("SELECT :name", Params.named([(":name", Value.text("kit"))]), True)
        assert stmt.args is None
        assert stmt.named_args is not None
        assert stmt.named_args[0].name == "name"
        assert stmt.named_args[0].value == WireText(value="kit")

    def test_named_duplicates_all_sent(self) -> None:
        stmt = codec.build_execute_statement("SELECT :a", Params.named([("a", 1), (":a", 2)]), True)
        assert stmt.named_args is not None
        assert [(arg.name, arg.value) for arg in stmt.named_args] == [
            ("a", WireInteger(value="1")),
            ("a", WireInteger(value="2")),
        ]

    def test_empty_params_omitted(self) -> None:
        for params in (Params.empty(), Params.named({})):
            stmt = codec.build_execute_statement("SELECT 1", params, False)
            assert stmt.args is None
            assert stmt.named_args is None

    def test_rejects_non_finite_float(self) -> None:
        with pytest.raises(DecodeError):
            codec.build_execute_statement("SELECT ?", Params.positional([Value.float(math.nan)]), True)

    def test_rejects_empty_named_parameter(self) -> None:
        with pytest.raises(DecodeError):
            codec.build_execute_statement("SELECT ?", Params.named({"@": 1}), True)


class TestDecodeResults:
    """Tests for decode_query_result and decode_exec_result."""

    def test_query_result_preserves_telemetry(self) -> None:
        decoded = codec.decode_query_result(
            ExecuteResult(replication_index="42", rows_read=11, rows_written=3, query_duration_ms=1.75)
        )
        assert decoded.replication_index == "42"
        assert decoded.rows_read == 11
        assert decoded.rows_written == 3
        assert decoded.query_duration_ms == 1.75

    def test_query_result_rows_and_cols(self) -> None:
        decoded = codec.decode_query_result(
            ExecuteResult(
                cols=[WireCol(name="id", decltype="INTEGER"), WireCol(name="name")],
                rows=[[WireInteger(value="1"), WireText(value="Kit")]],
            )
        )
        assert decoded.cols == [Col("id", "INTEGER"), Col("name", None)]
        assert decoded.rows == [[Value.integer(1), Value.text("Kit")]]

    def test_row_width_mismatch(self) -> None:
        with pytest.raises(DecodeError, match="row 0 has 1 values but result has 2 columns"):
            codec.decode_query_result(
                ExecuteResult(
                    cols=[WireCol(name="a"), WireCol(name="b")],
                    rows=[[WireNull()]],
                )
            )

    def test_exec_result_preserves_telemetry(self) -> None:
        decoded = codec.decode_exec_result(
            ExecuteResult(
                affected_row_count=1,
                last_insert_rowid="7",
                replication_index="43",
                rows_read=2,
                rows_written=1,
                query_duration_ms=0.25,
            )
        )
        assert decoded.affected_row_count == 1
        assert decoded.last_insert_rowid == 7
        assert decoded.replication_index == "43"
        assert decoded.rows_read == 2
        assert decoded.rows_written == 1

    def test_last_insert_rowid_parsed(self) -> None:
        assert codec.decode_exec_result(ExecuteResult(last_insert_rowid="42")).last_insert_rowid == 42

    def test_last_insert_rowid_absent(self) -> None:
        assert codec.decode_exec_result(ExecuteResult()).last_insert_rowid is None

    def test_last_insert_rowid_invalid(self) -> None:
        with pytest.raises(DecodeError, match="invalid last_insert_rowid 'abc'"):
            codec.decode_exec_result(ExecuteResult(last_insert_rowid="abc"))

    def test_last_insert_rowid_huge_digit_string(self) -> None:
        with pytest.raises(DecodeError, match="invalid last_insert_rowid"):
            codec.decode_exec_result(ExecuteResult(last_insert_rowid="1" * 5000))
