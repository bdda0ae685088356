"""
Base Transport Interface for the Bunny Database client.

Defines the abstract interface the client sends pipelines through.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Self


@dataclass(frozen=True)
class TransportResponse:
    """
    Raw answer of one HTTP attempt.

    Attributes:
        status: HTTP status code
        body: Response body bytes
    """

    status: int
    body: bytes

    @property
    def is_success(self) -> bool:
        """Check for a 2xx status."""
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (undecodable bytes replaced)."""
        return self.body.decode("utf-8", errors="replace")


class BaseTransport(ABC):
    """
    Abstract base class for pipeline transports.

    A transport performs exactly one POST per call and never retries; retry
    policy belongs to the client.
    """

    @abstractmethod
    async def post(
        self,
        url: str,
        headers: dict[str, str],
        body: bytes,
        timeout: float,
    ) -> TransportResponse:
        """
        Send one POST request.

        Args:
            url: Pipeline endpoint URL
            headers: Request headers
            body: Serialized request body
            timeout: Limit for the whole attempt, in seconds

        Returns:
            Status and body of the response, whatever the status

        Raises:
            TransportError: If no response could be obtained
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
        ...

    # Context manager support

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
