"""Async client dispatching typed messages over an httpx transport.

The Client holds a shared ``httpx.AsyncClient`` and an optional base
address. It does not own the transport: connection pooling, TLS and
redirects stay with the caller-provided client, which the Client never
closes. API-specific clients subclass Client and wrap send() with their
concrete Message types.

Example:
    >>> import httpx
    >>> from restwire import Client, EmptyRequest, Message, StringResponse
    >>>
    >>> class Ping(Message[EmptyRequest, StringResponse]):
    ...     endpoint = "ping"
    ...
    ...     def __init__(self) -> None:
    ...         super().__init__(EmptyRequest(), StringResponse())
    >>>
    >>> async with httpx.AsyncClient() as http_client:
    ...     client = Client(http_client, "https://api.example.com/v1/")
    ...     message = Ping()
    ...     status = await client.send(message)
    ...     print(status, message.response.content)
"""

from __future__ import annotations

import time

import httpx

from restwire.cancellation import CancellationToken
from restwire.errors import InvalidArgumentError, OperationCancelledError
from restwire.message import Message, MessageState, URLTypes
from restwire.observability import get_logger
from restwire.utils.sanitization import sanitize_headers, sanitize_url

# Module logger
logger = get_logger(__name__)


class Client:
    """Dispatches messages through a shared httpx transport.

    Attributes:
        base_url: Address relative message endpoints are resolved against,
            or None when every message supplies an absolute address
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: URLTypes | None = None) -> None:
        """Initialize the client.

        Args:
            http_client: Transport used for every dispatch (shared, not owned)
            base_url: Optional base address

        Raises:
            InvalidArgumentError: If ``http_client`` is None
        """
        if http_client is None:
            raise InvalidArgumentError("http_client")
        self._http_client = http_client
        self._base_url = httpx.URL(base_url) if base_url is not None else None

    @property
    def base_url(self) -> httpx.URL | None:
        return self._base_url

    async def send(self, message: Message, token: CancellationToken | None = None) -> int:
        """Dispatch ``message`` and return the response status code.

        Builds the wire request from the message, submits it to the
        transport, feeds the wire response back into the message and
        closes the wire response. Nothing is retried.

        Args:
            message: Message to dispatch; its response is populated in place
            token: Optional cancellation token threaded through every step

        Returns:
            HTTP status code of the response

        Raises:
            InvalidArgumentError: If ``message`` is None
            OperationCancelledError: If ``token`` is triggered before or during dispatch
            SerializationError: If a JSON response body cannot be decoded
            httpx.HTTPError: Transport failures, propagated unchanged
        """
        if message is None:
            raise InvalidArgumentError("message")

        token = token or CancellationToken()
        message_type = type(message).__name__
        start_time = time.perf_counter()

        try:
            token.raise_if_cancelled("send")
            wire_request = await message.build_request(self._base_url, token)
            target_url = sanitize_url(str(wire_request.url))
            logger.info(
                "restwire.client.send",
                message_type=message_type,
                method=wire_request.method,
                target_url=target_url,
                headers=sanitize_headers(message.request.headers),
            )

            wire_response = await token.run(
                self._http_client.send(wire_request, stream=True), "transport send"
            )
            try:
                message.advance(MessageState.SENT)
                await message.consume_response(wire_response, token)
            finally:
                await wire_response.aclose()
        except OperationCancelledError as e:
            logger.info(
                "restwire.client.cancelled",
                message_type=message_type,
                stage=e.stage,
            )
            message.fail()
            raise
        except BaseException as e:
            logger.warning(
                "restwire.client.error",
                message_type=message_type,
                error_type=type(e).__name__,
                error=str(e)[:200],
            )
            message.fail()
            raise

        message.advance(MessageState.COMPLETED)
        logger.info(
            "restwire.client.response",
            message_type=message_type,
            target_url=target_url,
            status_code=wire_response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return wire_response.status_code


__all__ = ["Client"]
