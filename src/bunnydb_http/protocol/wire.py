"""
Pipeline wire protocol models.

Handles the JSON request/response envelopes exchanged with the
``/v2/pipeline`` endpoint. Integer and float payloads travel as decimal
strings so that 64-bit precision survives JSON.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import DecodeError


class WireModel(BaseModel):
    """Base for all wire models. Unknown keys sent by the server are ignored."""

    model_config = ConfigDict(extra="ignore")


# Values


class WireNull(WireModel):
    type: Literal["null"] = "null"


class WireInteger(WireModel):
    type: Literal["integer"] = "integer"
    value: str


class WireFloat(WireModel):
    type: Literal["float"] = "float"
    # Encoded as a string; a bare JSON number is tolerated on the way in.
    value: str | float = Field(union_mode="left_to_right")


class WireText(WireModel):
    type: Literal["text"] = "text"
    value: str


class WireBlob(WireModel):
    type: Literal["blob"] = "blob"
    base64: str


WireValue = Annotated[
    Union[WireNull, WireInteger, WireFloat, WireText, WireBlob],
    Field(discriminator="type"),
]


# Requests


class NamedArg(WireModel):
    name: str
    value: WireValue


class ExecuteStatement(WireModel):
    """
    A statement as sent on the wire.

    At most one of ``args``/``named_args`` is set; unset lists are omitted
    from the payload entirely.
    """

    sql: str
    args: list[WireValue] | None = None
    named_args: list[NamedArg] | None = None
    want_rows: bool


class ExecuteRequest(WireModel):
    type: Literal["execute"] = "execute"
    stmt: ExecuteStatement


class CloseRequest(WireModel):
    type: Literal["close"] = "close"


WireRequest = Annotated[Union[ExecuteRequest, CloseRequest], Field(discriminator="type")]


class PipelineRequest(WireModel):
    """Ordered requests of one pipeline round trip."""

    requests: list[WireRequest] = Field(default_factory=list)

    @classmethod
    def for_statements(cls, statements: list[ExecuteStatement]) -> "PipelineRequest":
        """Build a pipeline of execute requests followed by the trailing close."""
        requests: list[Any] = [ExecuteRequest(stmt=stmt) for stmt in statements]
        requests.append(CloseRequest())
        return cls(requests=requests)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> bytes:
        """Serialize the request body."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")


# Responses


class WireCol(WireModel):
    name: str
    decltype: str | None = None


class ExecuteResult(WireModel):
    cols: list[WireCol] = Field(default_factory=list)
    rows: list[list[WireValue]] = Field(default_factory=list)
    affected_row_count: int = Field(default=0, ge=0)
    last_insert_rowid: str | None = None
    replication_index: str | None = None
    rows_read: int | None = Field(default=None, ge=0)
    rows_written: int | None = Field(default=None, ge=0)
    query_duration_ms: float | None = None


class ResponseEnvelope(WireModel):
    type: str
    result: ExecuteResult | None = None


class WireError(WireModel):
    message: str
    code: str | None = None


class PipelineResult(WireModel):
    """
    One result of a pipeline, matched positionally to its request.

    ``type`` is ``"ok"`` (with ``response``) or ``"error"`` (with ``error``);
    labels are kept as plain strings and checked by the client.
    """

    type: str
    response: ResponseEnvelope | None = None
    error: WireError | None = None


class PipelineResponse(WireModel):
    baton: str | None = None
    base_url: str | None = None
    results: list[PipelineResult]

    @classmethod
    def parse(cls, body: bytes | str) -> "PipelineResponse":
        """
        Parse a response body.

        Raises:
            DecodeError: If the body is not valid JSON of the expected shape.
                The raw body is included in the message.
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
            raise DecodeError(f"invalid pipeline response JSON: {e}; body: {text}") from e
