"""
Pytest configuration for bunnydb-http tests.

Unit tests run against the in-process fake in ``tests/fakes.py``. Live
integration tests read credentials from the environment and are skipped
when they are absent.
"""

import os
from collections.abc import Callable

import pytest

from tests.fakes import MockPipelineServer, MockResponse, RecordingSleep

# ---------------------------------------------------------------------------
# Live database settings (import these in test files)
# ---------------------------------------------------------------------------
LIVE_PIPELINE_URL = os.getenv("BUNNYDB_PIPELINE_URL", "")
LIVE_TOKEN = os.getenv("BUNNYDB_TOKEN", "")
LIVE_AVAILABLE = bool(LIVE_PIPELINE_URL.strip() and LIVE_TOKEN.strip())


@pytest.fixture
def pipeline_server() -> Callable[..., MockPipelineServer]:
    """
    Factory fixture creating a fake pipeline endpoint.

        def test_something(pipeline_server):
            server = pipeline_server(MockResponse.json(200, body))
            db = server.client()
    """

    def factory(*responses: MockResponse) -> MockPipelineServer:
        return MockPipelineServer(list(responses))

    return factory


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep replacement recording retry delays."""
    return RecordingSleep()


@pytest.fixture(scope="session")
def live_available() -> bool:
    """Whether live Bunny Database credentials are configured."""
    return LIVE_AVAILABLE
