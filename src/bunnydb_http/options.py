"""
Client options dataclass.

Provides an immutable container for per-attempt timeout and retry settings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientOptions:
    """
    Immutable request options for ``BunnyDbClient``.

    Attributes:
        timeout_ms: Timeout of a single HTTP attempt, in milliseconds.
        max_retries: Extra attempts allowed after a retryable failure.
        retry_backoff_ms: Base delay before the first retry; doubles per attempt.
    """

    timeout_ms: int = 10_000
    max_retries: int = 0
    retry_backoff_ms: int = 250

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        for name in ("max_retries", "retry_backoff_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def timeout(self) -> float:
        """Per-attempt timeout in seconds."""
        return self.timeout_ms / 1000


__all__ = ["ClientOptions"]
