"""Messages: one request strategy paired with one response strategy.

A Message is the unit dispatched by Client.send(). Concrete messages set
``method`` and ``endpoint`` (or override build_request() entirely) and pick
the request/response strategies that match the remote endpoint.

Lifecycle::

    CREATED -> REQUEST_BUILT -> SENT -> RESPONSE_CONSUMED -> COMPLETED
        \\____________\\___________\\____________\\______-> FAILED

A message is dispatched at most once; COMPLETED and FAILED are terminal.

Example:
    >>> class GetItem(Message[EmptyRequest, JsonResponse[Item]]):
    ...     method = "GET"
    ...
    ...     def __init__(self, item_id: str) -> None:
    ...         super().__init__(EmptyRequest(), JsonResponse(Item))
    ...         self.endpoint = f"items/{item_id}"
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar, Union

import httpx

from restwire.cancellation import CancellationToken
from restwire.constants import CONTENT_HEADER_NAMES
from restwire.content import Content
from restwire.errors import InvalidArgumentError, InvalidStateError
from restwire.headers import HeaderCollection
from restwire.observability import get_logger
from restwire.request import Request
from restwire.response import Response

logger = get_logger(__name__)

RequestT = TypeVar("RequestT", bound=Request)
ResponseT = TypeVar("ResponseT", bound=Response)

URLTypes = Union[str, httpx.URL]


class MessageState(str, Enum):
    """Dispatch lifecycle states of a Message."""

    CREATED = "created"
    REQUEST_BUILT = "request_built"
    SENT = "sent"
    RESPONSE_CONSUMED = "response_consumed"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def terminal_states(cls) -> frozenset["MessageState"]:
        return frozenset({cls.COMPLETED, cls.FAILED})

    def is_terminal(self) -> bool:
        return self in self.terminal_states()


VALID_TRANSITIONS: dict[MessageState, set[MessageState]] = {
    MessageState.CREATED: {MessageState.REQUEST_BUILT, MessageState.FAILED},
    MessageState.REQUEST_BUILT: {MessageState.SENT, MessageState.FAILED},
    MessageState.SENT: {MessageState.RESPONSE_CONSUMED, MessageState.FAILED},
    MessageState.RESPONSE_CONSUMED: {MessageState.COMPLETED, MessageState.FAILED},
    MessageState.COMPLETED: set(),  # Terminal state
    MessageState.FAILED: set(),  # Terminal state
}


def can_transition(from_state: MessageState, to_state: MessageState) -> bool:
    """Check if a message may move from one state to another."""
    return to_state in VALID_TRANSITIONS.get(from_state, set())


class Message(Generic[RequestT, ResponseT]):
    """A paired request/response exchange.

    Attributes:
        method: HTTP method (default: "GET")
        endpoint: Relative or absolute target address
        request: Request strategy producing the outgoing body
        response: Response strategy populated from the wire response
    """

    method: str = "GET"
    endpoint: URLTypes | None = None

    def __init__(self, request: RequestT, response: ResponseT) -> None:
        if request is None:
            raise InvalidArgumentError("request")
        if response is None:
            raise InvalidArgumentError("response")
        self.request = request
        self.response = response
        self._state = MessageState.CREATED

    @property
    def state(self) -> MessageState:
        return self._state

    def advance(self, new_state: MessageState) -> None:
        """Move to ``new_state``.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if not can_transition(self._state, new_state):
            raise InvalidStateError(
                from_state=self._state.value,
                to_state=new_state.value,
                details={"message_type": type(self).__name__},
            )
        logger.debug(
            "restwire.message.state",
            message_type=type(self).__name__,
            from_state=self._state.value,
            to_state=new_state.value,
        )
        self._state = new_state

    def fail(self) -> None:
        """Move to FAILED unless the message already reached a terminal state."""
        if not self._state.is_terminal():
            self.advance(MessageState.FAILED)

    def resolve_url(self, base_url: URLTypes | None) -> httpx.URL:
        """Combine ``endpoint`` with ``base_url``.

        An absolute endpoint is used as is; a relative one is resolved
        against ``base_url`` following RFC 3986.

        Raises:
            InvalidArgumentError: If no absolute address can be formed
        """
        endpoint = httpx.URL(self.endpoint) if self.endpoint is not None else httpx.URL("")
        if endpoint.is_absolute_url:
            return endpoint
        if base_url is None:
            raise InvalidArgumentError(
                "base_url",
                reason=f"is required to resolve relative endpoint {str(endpoint)!r}",
            )
        return httpx.URL(base_url).join(endpoint)

    async def build_request(
        self, base_url: URLTypes | None, token: CancellationToken
    ) -> httpx.Request:
        """Build the wire request.

        Request headers are attached first; the body's content headers
        replace any same-named request header.
        """
        if self._state is not MessageState.CREATED:
            raise InvalidStateError(
                from_state=self._state.value,
                to_state=MessageState.REQUEST_BUILT.value,
                details={"message_type": type(self).__name__},
            )
        try:
            token.raise_if_cancelled("request build")
            url = self.resolve_url(base_url)
            headers = HeaderCollection(self.request.headers)
            content = await self.request.build_content(token)
            if content is not None:
                for name, values in content.headers.items():
                    headers.set(name, values)
            wire_request = httpx.Request(
                self.method,
                url,
                headers=headers.multi_items(),
                content=content.body if content is not None else None,
            )
        except BaseException:
            self.fail()
            raise
        self.advance(MessageState.REQUEST_BUILT)
        return wire_request

    async def consume_response(self, wire_response: httpx.Response, token: CancellationToken) -> None:
        """Populate ``response`` from the wire response.

        Response headers are assigned first (content headers excluded),
        then the response strategy reads the body exactly once.
        """
        if self._state is not MessageState.SENT:
            raise InvalidStateError(
                from_state=self._state.value,
                to_state=MessageState.RESPONSE_CONSUMED.value,
                details={"message_type": type(self).__name__},
            )
        try:
            token.raise_if_cancelled("response read")
            content_headers, message_headers = HeaderCollection(wire_response.headers).partition(
                CONTENT_HEADER_NAMES
            )
            self.response.headers = message_headers
            content = Content.from_response(wire_response, content_headers)
            await self.response.read_content(content, token)
        except BaseException:
            self.fail()
            raise
        self.advance(MessageState.RESPONSE_CONSUMED)


__all__ = ["Message", "MessageState", "URLTypes", "VALID_TRANSITIONS", "can_transition"]
