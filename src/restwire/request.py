"""Request content strategies.

Each Request subclass knows how to produce the outgoing body for one kind
of payload. Headers set on a request are attached to the wire request as
they are; the body's own headers (Content-Type, ...) come from the
Content returned by build_content().

Example:
    >>> request = StringRequest("hello")
    >>> request.encoding = "utf-16"
    >>> request.media_type = "text/html"
"""

from __future__ import annotations

import codecs
from collections.abc import Iterable, Mapping
from typing import Generic, TypeVar, Union
from urllib.parse import urlencode

from restwire.cancellation import CancellationToken
from restwire.constants import (
    CONTENT_TYPE_HEADER,
    DEFAULT_CHARSET,
    FORM_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
)
from restwire.content import Content, format_content_type
from restwire.errors import InvalidArgumentError
from restwire.headers import HeaderCollection
from restwire.serialization import JsonOptions, dump_json

T = TypeVar("T")

FormPayload = Union[Mapping[str, str], Iterable[tuple[str, str]]]


class Request:
    """Base request: no body.

    Attributes:
        headers: Optional headers attached to the outgoing request
    """

    def __init__(self, headers: HeaderCollection | None = None) -> None:
        self.headers = headers

    async def build_content(self, token: CancellationToken) -> Content | None:
        """Produce the outgoing body, or None for a body-less request."""
        token.raise_if_cancelled("request build")
        return None


class EmptyRequest(Request):
    """A request that carries no body."""


class StringRequest(Request):
    """A raw text body.

    Content-Type precedence:
        - neither ``encoding`` nor ``media_type`` set: ``text/plain; charset=utf-8``
        - only ``encoding`` set: ``text/plain; charset=<encoding>``
        - both set: ``<media_type>; charset=<encoding>``

    A ``media_type`` without an ``encoding`` has no effect.

    Raises:
        InvalidArgumentError: If ``payload`` is None or ``encoding`` names no
            known codec
    """

    def __init__(
        self,
        payload: str,
        encoding: str | None = None,
        media_type: str | None = None,
        headers: HeaderCollection | None = None,
    ) -> None:
        if payload is None:
            raise InvalidArgumentError("payload")
        super().__init__(headers)
        self._payload = payload
        self.encoding = encoding
        self.media_type = media_type

    @property
    def payload(self) -> str:
        return self._payload

    @property
    def encoding(self) -> str | None:
        return self._encoding

    @encoding.setter
    def encoding(self, value: str | None) -> None:
        if value is not None:
            try:
                codecs.lookup(value)
            except LookupError as e:
                raise InvalidArgumentError("encoding", f"names an unknown codec: {value!r}") from e
        self._encoding = value

    async def build_content(self, token: CancellationToken) -> Content | None:
        token.raise_if_cancelled("request build")
        if self.encoding is None:
            charset, media_type = DEFAULT_CHARSET, TEXT_MEDIA_TYPE
        elif self.media_type is None:
            charset, media_type = self.encoding, TEXT_MEDIA_TYPE
        else:
            charset, media_type = self.encoding, self.media_type
        body = self._payload.encode(charset)
        return Content(body, {CONTENT_TYPE_HEADER: format_content_type(media_type, charset)})


class JsonRequest(Request, Generic[T]):
    """A payload serialized to JSON.

    ``options`` defaults to JsonOptions(); the body is always UTF-8.
    """

    def __init__(
        self,
        payload: T,
        options: JsonOptions | None = None,
        headers: HeaderCollection | None = None,
    ) -> None:
        if payload is None:
            raise InvalidArgumentError("payload")
        super().__init__(headers)
        self._payload = payload
        self.options = options

    @property
    def payload(self) -> T:
        return self._payload

    @payload.setter
    def payload(self, value: T) -> None:
        if value is None:
            raise InvalidArgumentError("payload")
        self._payload = value

    async def build_content(self, token: CancellationToken) -> Content | None:
        token.raise_if_cancelled("request build")
        body = dump_json(self._payload, self.options)
        return Content(
            body, {CONTENT_TYPE_HEADER: format_content_type(JSON_MEDIA_TYPE, DEFAULT_CHARSET)}
        )


class FormUrlEncodedRequest(Request):
    """Key/value pairs sent as ``application/x-www-form-urlencoded``.

    Pair order is preserved; spaces are encoded as ``+``.
    """

    def __init__(self, payload: FormPayload, headers: HeaderCollection | None = None) -> None:
        if payload is None:
            raise InvalidArgumentError("payload")
        super().__init__(headers)
        pairs = payload.items() if isinstance(payload, Mapping) else payload
        self._payload: tuple[tuple[str, str], ...] = tuple((k, v) for k, v in pairs)

    @property
    def payload(self) -> tuple[tuple[str, str], ...]:
        return self._payload

    def encode(self) -> str:
        """Percent-encode the pairs in input order."""
        return urlencode(self._payload)

    async def build_content(self, token: CancellationToken) -> Content | None:
        token.raise_if_cancelled("request build")
        return Content(self.encode().encode("ascii"), {CONTENT_TYPE_HEADER: FORM_MEDIA_TYPE})


__all__ = [
    "EmptyRequest",
    "FormPayload",
    "FormUrlEncodedRequest",
    "JsonRequest",
    "Request",
    "StringRequest",
]
