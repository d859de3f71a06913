"""Pytest fixtures for restwire tests.

Fixtures (use with pytest):
    mock_endpoint: Fresh MockEndpoint for the test.
    mock_http_client: httpx.AsyncClient wired to mock_endpoint (async).
    mock_client: restwire Client over mock_http_client, based at the endpoint URL.
"""

from typing import AsyncIterator

import httpx
import pytest

from restwire.client import Client
from restwire.testing.mocks import MockEndpoint


@pytest.fixture
def mock_endpoint() -> MockEndpoint:
    """Create a fresh MockEndpoint for the test."""
    return MockEndpoint()


@pytest.fixture
async def mock_http_client(mock_endpoint: MockEndpoint) -> AsyncIterator[httpx.AsyncClient]:
    """Provide an httpx.AsyncClient routed to ``mock_endpoint``; closed after the test."""
    async with mock_endpoint.http_client() as http_client:
        yield http_client


@pytest.fixture
def mock_client(mock_endpoint: MockEndpoint, mock_http_client: httpx.AsyncClient) -> Client:
    """Provide a Client whose base address is the mock endpoint."""
    return Client(mock_http_client, mock_endpoint.base_url)
