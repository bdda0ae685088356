"""
Bunny Database Protocol Module.

Implements the JSON pipeline protocol and the value codec.
"""

from .codec import (
    build_execute_statement,
    decode_exec_result,
    decode_query_result,
    decode_value,
    encode_value,
    normalize_named_parameter_name,
)
from .wire import (
    CloseRequest,
    ExecuteRequest,
    ExecuteResult,
    ExecuteStatement,
    PipelineRequest,
    PipelineResponse,
    PipelineResult,
)

__all__ = [
    # Wire
    "CloseRequest",
    "ExecuteRequest",
    "ExecuteResult",
    "ExecuteStatement",
    "PipelineRequest",
    "PipelineResponse",
    "PipelineResult",
    # Codec
    "build_execute_statement",
    "decode_exec_result",
    "decode_query_result",
    "decode_value",
    "encode_value",
    "normalize_named_parameter_name",
]
