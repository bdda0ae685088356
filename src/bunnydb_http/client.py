"""
Bunny Database pipeline client.

Turns ``query``/``execute``/``batch`` calls into one pipeline round trip
each, retries transient failures with exponential backoff and maps the
pipeline results back onto typed outcomes.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Self

from .config import (
    db_id_to_pipeline_url,
    load_env_credentials,
    load_env_db_id_credentials,
    normalize_bearer_authorization,
)
from .connection.base import BaseTransport
from .connection.http import HTTPTransport
from .exceptions import DecodeError, HttpError, PipelineError, TransportError
from .options import ClientOptions
from .params import Params, Statement
from .protocol.codec import build_execute_statement, decode_exec_result, decode_query_result
from .protocol.wire import ExecuteResult, PipelineRequest, PipelineResponse, PipelineResult, ResponseEnvelope
from .types import ExecResult, QueryResult, SqlError, StatementOutcome

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]

# 2**16 times the base delay is already far beyond any useful wait
MAX_BACKOFF_EXPONENT = 16


def backoff_delay_ms(retry_backoff_ms: int, attempt: int) -> int:
    """Delay before retrying after failed attempt number ``attempt`` (0-based)."""
    return retry_backoff_ms * (1 << min(attempt, MAX_BACKOFF_EXPONENT))


def classify_result(result: PipelineResult, request_index: int, expected_kind: str) -> ResponseEnvelope | SqlError:
    """
    Check one pipeline result against the response kind its request expects.

    Returns the response envelope of an ``ok`` result, or a ``SqlError`` for a
    well-formed ``error`` result. Callers decide whether that SQL error fails
    the call or is reported in place.

    Raises:
        DecodeError: If the result is structurally invalid (unknown type,
            missing payload, mismatched response kind)
    """
    if result.type == "ok":
        if result.response is None:
            raise DecodeError(f"missing {expected_kind} response payload for request {request_index}")
        if result.response.type != expected_kind:
            raise DecodeError(
                f"expected {expected_kind} response at request {request_index}, got '{result.response.type}'"
            )
        return result.response
    if result.type == "error":
        if result.error is None:
            raise DecodeError(f"missing error payload for request {request_index}")
        return SqlError(request_index=request_index, message=result.error.message, code=result.error.code)
    raise DecodeError(f"unknown pipeline result type '{result.type}' at request {request_index}")


def _pipeline_error(error: SqlError) -> PipelineError:
    return PipelineError(request_index=error.request_index, message=error.message, code=error.code)


def _execute_payload(envelope: ResponseEnvelope, request_index: int) -> ExecuteResult:
    if envelope.result is None:
        raise DecodeError(f"missing execute result payload at request {request_index}")
    return envelope.result


def expect_execute(result: PipelineResult, request_index: int) -> ExecuteResult:
    """Unwrap an execute result; an error result fails the call with PipelineError."""
    outcome = classify_result(result, request_index, "execute")
    if isinstance(outcome, SqlError):
        raise _pipeline_error(outcome)
    return _execute_payload(outcome, request_index)


def expect_close(result: PipelineResult, request_index: int) -> None:
    """Verify the trailing close succeeded; anything else fails the call."""
    outcome = classify_result(result, request_index, "close")
    if isinstance(outcome, SqlError):
        raise _pipeline_error(outcome)


def decode_statement_outcome(result: PipelineResult, request_index: int, want_rows: bool) -> StatementOutcome:
    """Map one batch result to its outcome; SQL errors are returned, not raised."""
    outcome = classify_result(result, request_index, "execute")
    if isinstance(outcome, SqlError):
        return outcome
    execute_result = _execute_payload(outcome, request_index)
    if want_rows:
        return decode_query_result(execute_result)
    return decode_exec_result(execute_result)


def _check_result_count(response: PipelineResponse, expected: int) -> None:
    if len(response.results) != expected:
        raise DecodeError(f"result count mismatch: expected {expected}, got {len(response.results)}")


class BunnyDbClient:
    """
    HTTP client for the Bunny Database SQL pipeline endpoint.

    Every call is one POST carrying the statements plus a trailing close
    request. The client holds no per-call state and can be shared between
    concurrent tasks.

    Usage:
        async with BunnyDbClient.bearer(pipeline_url, token) as db:
            await db.execute("INSERT INTO users (name) VALUES (?)", ["Kit"])
            result = await db.query("SELECT id, name FROM users WHERE name = :name", {"name": "Kit"})

    Retries resend the identical body, so a non-idempotent statement may be
    applied more than once when a retryable failure hides a server-side success.
    """

    def __init__(
        self,
        pipeline_url: str,
        authorization: str,
        options: ClientOptions | None = None,
        transport: BaseTransport | None = None,
        sleep: SleepFunc | None = None,
    ):
        """
        Initialize the client.

        Args:
            pipeline_url: Full pipeline endpoint URL
            authorization: Raw ``Authorization`` header value, sent as is
            options: Timeout and retry settings
            transport: Transport to send pipelines through (httpx by default)
            sleep: Coroutine function used to wait between retries (seconds)
        """
        self.pipeline_url = pipeline_url
        self._authorization = authorization
        self.options = options or ClientOptions()
        self.transport = transport or HTTPTransport()
        self._sleep: SleepFunc = sleep or asyncio.sleep

    # Constructors

    @classmethod
    def raw_auth(cls, pipeline_url: str, authorization: str, **kwargs: Any) -> Self:
        """Create a client sending ``authorization`` verbatim (e.g. ``"Bearer <token>"``)."""
        return cls(pipeline_url, authorization, **kwargs)

    @classmethod
    def bearer(cls, pipeline_url: str, token: str, **kwargs: Any) -> Self:
        """Create a client from a bearer token; the ``Bearer`` prefix is optional."""
        return cls(pipeline_url, normalize_bearer_authorization(token), **kwargs)

    @classmethod
    def from_db_id(cls, db_id: str, token: str, **kwargs: Any) -> Self:
        """Create a client from a database ID, deriving the pipeline URL."""
        return cls.bearer(db_id_to_pipeline_url(db_id), token, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> Self:
        """
        Create a client from ``BUNNYDB_PIPELINE_URL`` and ``BUNNYDB_TOKEN``.

        Raises:
            ConfigurationError: If a variable is missing or empty
        """
        url, token = load_env_credentials()
        return cls.bearer(url, token, **kwargs)

    @classmethod
    def from_env_db_id(cls, **kwargs: Any) -> Self:
        """
        Create a client from ``BUNNYDB_ID`` and ``BUNNYDB_TOKEN``.

        Raises:
            ConfigurationError: If a variable is missing or empty
        """
        db_id, token = load_env_db_id_credentials()
        return cls.from_db_id(db_id, token, **kwargs)

    def with_options(self, options: ClientOptions) -> Self:
        """Return a copy of this client using ``options``; the transport is shared."""
        clone = copy.copy(self)
        clone.options = options
        return clone

    @property
    def headers(self) -> dict[str, str]:
        """Request headers for pipeline calls."""
        return {
            "Authorization": self._authorization,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(pipeline_url={self.pipeline_url!r}, "
            f"authorization='<redacted>', options={self.options!r})"
        )

    # Lifecycle

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    # Operations

    async def query(self, sql: str, params: Any = None) -> QueryResult:
        """
        Execute a statement and return its rows.

        Args:
            sql: SQL text
            params: ``Params``, a mapping (named) or a sequence (positional)

        Raises:
            PipelineError: If the server reports an error for the statement
            DecodeError, HttpError, TransportError: See ``BunnyDbError``
        """
        result = await self._run_single(sql, Params.coerce(params), want_rows=True)
        return decode_query_result(result)

    async def execute(self, sql: str, params: Any = None) -> ExecResult:
        """
        Execute a statement and return its affected-row metadata.

        Raises:
            PipelineError: If the server reports an error for the statement
        """
        result = await self._run_single(sql, Params.coerce(params), want_rows=False)
        return decode_exec_result(result)

    async def batch(self, statements: Iterable[Statement]) -> list[StatementOutcome]:
        """
        Send several statements in one pipeline request.

        Statement-level SQL errors come back as ``SqlError`` at the failing
        statement's position instead of failing the whole batch. A failed
        close, a malformed response or a transport failure still raises.

        Args:
            statements: Statements in execution order

        Returns:
            One QueryResult, ExecResult or SqlError per statement
        """
        statements = list(statements)
        payload = PipelineRequest.for_statements(
            [build_execute_statement(s.sql, s.params, s.want_rows) for s in statements]
        )
        response = await self._send_pipeline(payload)
        _check_result_count(response, len(statements) + 1)

        outcomes = [
            decode_statement_outcome(result, index, statement.want_rows)
            for index, (statement, result) in enumerate(zip(statements, response.results))
        ]
        expect_close(response.results[-1], len(statements))
        return outcomes

    async def _run_single(self, sql: str, params: Params, want_rows: bool) -> ExecuteResult:
        payload = PipelineRequest.for_statements([build_execute_statement(sql, params, want_rows)])
        response = await self._send_pipeline(payload)
        _check_result_count(response, 2)

        execute_result = expect_execute(response.results[0], 0)
        expect_close(response.results[1], 1)
        return execute_result

    # Transport with retry

    async def _attempt(self, body: bytes) -> PipelineResponse:
        response = await self.transport.post(
            self.pipeline_url,
            self.headers,
            body,
            self.options.timeout,
        )
        if not response.is_success:
            raise HttpError(response.status, response.text)
        return PipelineResponse.parse(response.body)

    async def _send_pipeline(self, payload: PipelineRequest) -> PipelineResponse:
        """
        Send a pipeline, retrying transient failures.

        Attempts run strictly one after another. After failed attempt ``n``
        the client waits ``retry_backoff_ms * 2**min(n, 16)`` milliseconds.
        Decode failures and non-retryable statuses are never retried.
        """
        body = payload.to_json()
        max_retries = self.options.max_retries

        for attempt in range(max_retries + 1):
            logger.debug(
                f"Sending pipeline with {len(payload.requests)} requests to {self.pipeline_url} "
                f"(attempt {attempt + 1}/{max_retries + 1})"
            )
            try:
                return await self._attempt(body)
            except (TransportError, HttpError) as e:
                if not e.is_retryable:
                    raise
                if attempt >= max_retries:
                    if max_retries:
                        logger.warning(f"Pipeline request failed after {attempt + 1} attempts: {e}")
                    raise
                await self._wait_before_retry(attempt, e)

        raise AssertionError("retry loop ended without a result")

    async def _wait_before_retry(self, attempt: int, error: Exception) -> None:
        delay_ms = backoff_delay_ms(self.options.retry_backoff_ms, attempt)
        logger.debug(f"Retrying pipeline request after {delay_ms} ms ({error})")
        await self._sleep(delay_ms / 1000)
