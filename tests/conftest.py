"""Shared pytest fixtures for restwire tests.

This module provides a routed mock endpoint answering the test routes
used by the client and message tests. Payload models and message types
live in tests.factories.
"""

from __future__ import annotations

import httpx
import pytest

from restwire.testing import MockEndpoint, text_response
from tests.factories import (
    CUSTOM_HEADER,
    HTML_VALUE,
    STREAM_VALUE,
    TEXT_VALUE,
    form_echo_route,
    json_echo_route,
    string_echo_route,
)

# Load restwire.testing fixtures (mock_endpoint, mock_http_client, mock_client)
pytest_plugins = ["restwire.testing.fixtures"]


def _status_route(request: httpx.Request) -> httpx.Response:
    """Answer with the status code given in the ``code`` query parameter."""
    return httpx.Response(int(request.url.params.get("code", "200")))


def _header_echo_route(request: httpx.Request) -> httpx.Response:
    """Copy every value of the custom header into the response; 400 if missing."""
    values = request.headers.get_list(CUSTOM_HEADER)
    if not values:
        return httpx.Response(400)
    return httpx.Response(200, headers=[(CUSTOM_HEADER, value) for value in values])


def _head_route(request: httpx.Request) -> httpx.Response:
    """Answer with response and content headers but no body."""
    return httpx.Response(
        200,
        headers=[
            ("X-Request-Id", "req-1"),
            ("Content-Type", "application/json; charset=utf-8"),
            ("Content-Length", "42"),
            ("Content-Language", "en"),
            ("Content-Language", "fr"),
        ],
    )


def _stream_route(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200, content=STREAM_VALUE, headers={"Content-Type": "application/octet-stream"}
    )


@pytest.fixture
def routed_endpoint(mock_endpoint: MockEndpoint) -> MockEndpoint:
    """MockEndpoint with every test route registered."""
    mock_endpoint.add_route("status", _status_route)
    mock_endpoint.add_route("string", string_echo_route, method="POST")
    mock_endpoint.add_route("json", json_echo_route, method="POST")
    mock_endpoint.add_route("form", form_echo_route, method="POST")
    mock_endpoint.add_route("header", _header_echo_route)
    mock_endpoint.add_route("text", lambda request: text_response(TEXT_VALUE))
    mock_endpoint.add_route("html", lambda request: text_response(HTML_VALUE, media_type="text/html"))
    mock_endpoint.add_route(
        "json-as-text", lambda request: text_response('{"name": "x"}', media_type="text/plain")
    )
    mock_endpoint.add_route(
        "json-bad", lambda request: text_response("{not json", media_type="application/json")
    )
    mock_endpoint.add_route("head", _head_route)
    mock_endpoint.add_route("stream", _stream_route)
    mock_endpoint.add_route("no-content", lambda request: httpx.Response(204))
    return mock_endpoint
