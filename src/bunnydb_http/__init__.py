"""
bunnydb-http - An async Python client for the Bunny Database SQL pipeline API.

Wraps the ``/v2/pipeline`` endpoint: every call is one HTTP POST carrying
the statements and a trailing close request.

Supports:
- ``query`` (rows), ``execute`` (affected rows / last rowid)
- ``batch`` with per-statement SQL errors reported in place
- Positional and named parameters with exact integer/float round trips
- Retries with exponential backoff for transient HTTP and network failures

Usage:
    async with BunnyDbClient.bearer(pipeline_url, token) as db:
        await db.execute(
            "CREATE TABLE IF NOT EXISTS users (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"
        )
        result = await db.query("SELECT id, name FROM users WHERE name = :name", {"name": "Kit"})
"""

from .client import BunnyDbClient
from .config import db_id_to_pipeline_url, normalize_bearer_authorization, to_pipeline_url
from .connection import BaseTransport, HTTPTransport, TransportResponse
from .exceptions import (
    BunnyDbError,
    ConfigurationError,
    DecodeError,
    HttpError,
    PipelineError,
    TransportError,
    TransportErrorKind,
)
from .options import ClientOptions
from .params import Params, Statement
from .row_map import Row
from .types import Col, ExecResult, QueryResult, SqlError, StatementOutcome
from .value import Value, ValueType

__version__ = "0.3.0"
__all__ = [
    # Client
    "BunnyDbClient",
    "ClientOptions",
    # Transport
    "BaseTransport",
    "HTTPTransport",
    "TransportResponse",
    # Values & statements
    "Value",
    "ValueType",
    "Params",
    "Statement",
    # Results
    "Col",
    "Row",
    "QueryResult",
    "ExecResult",
    "SqlError",
    "StatementOutcome",
    # Helpers
    "db_id_to_pipeline_url",
    "normalize_bearer_authorization",
    "to_pipeline_url",
    # Exceptions
    "BunnyDbError",
    "ConfigurationError",
    "DecodeError",
    "HttpError",
    "PipelineError",
    "TransportError",
    "TransportErrorKind",
]
