"""restwire testing utilities for easier test authoring.

Modules:
    fixtures: Pytest fixtures (mock_endpoint, mock_http_client, mock_client).
    mocks: MockEndpoint serving route handlers through httpx.MockTransport.
    assertions: Custom assertions (assert_header_values, assert_no_requests,
              assert_form_body).

Example:
    >>> from restwire.testing import MockEndpoint, json_response
    >>> endpoint = MockEndpoint()
    >>> endpoint.add_route("items", lambda request: json_response({"id": 1}))
"""

from restwire.testing.assertions import (
    assert_form_body,
    assert_header_values,
    assert_no_requests,
)
from restwire.testing.mocks import MockEndpoint, json_response, text_response

__all__ = [
    "MockEndpoint",
    "assert_form_body",
    "assert_header_values",
    "assert_no_requests",
    "json_response",
    "text_response",
]
