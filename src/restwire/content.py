"""Wire body abstraction shared by request and response strategies.

A Content couples a body (bytes, or an async byte stream coming off the
transport) with the headers that describe it (Content-Type,
Content-Length, ...). Request strategies produce one; response strategies
consume one.
"""

from __future__ import annotations

import codecs
from collections.abc import AsyncIterable, AsyncIterator
from typing import IO, Any, Union

import httpx

from restwire.cancellation import CancellationToken
from restwire.constants import (
    CONTENT_HEADER_NAMES,
    CONTENT_TYPE_HEADER,
    DEFAULT_CHARSET,
    NO_BODY_STATUS_CODES,
)
from restwire.headers import HeaderCollection, HeaderSource

ContentBody = Union[bytes, AsyncIterable[bytes]]


def parse_content_type(value: str | None) -> tuple[str | None, dict[str, str]]:
    """Split a Content-Type value into ``(media_type, parameters)``.

    The media type and parameter names are lower-cased; quotes around
    parameter values are stripped.

    Example:
        >>> parse_content_type('Text/Plain; Charset="utf-8"')
        ('text/plain', {'charset': 'utf-8'})
    """
    if not value:
        return None, {}
    media_type, *raw_params = value.split(";")
    params: dict[str, str] = {}
    for raw in raw_params:
        name, sep, param_value = raw.partition("=")
        if not sep:
            continue
        params[name.strip().lower()] = param_value.strip().strip('"')
    return media_type.strip().lower() or None, params


def format_content_type(media_type: str, charset: str | None = None) -> str:
    """Build a Content-Type header value."""
    if charset:
        return f"{media_type}; charset={charset}"
    return media_type


class Content:
    """A message body plus its content headers.

    Attributes:
        headers: Headers describing the body (Content-Type, Content-Length, ...)
    """

    def __init__(self, body: ContentBody = b"", headers: HeaderSource | Any = None) -> None:
        self.headers = HeaderCollection(headers)
        self._body: ContentBody = body

    @classmethod
    def from_response(
        cls, response: httpx.Response, content_headers: HeaderCollection | None = None
    ) -> "Content | None":
        """Wrap the body of a wire response, or return None when it has none.

        1xx, 204 and 304 responses carry no body. Every other response,
        HEAD responses included, yields a Content holding the response's
        content headers. Callers that already split the headers pass the
        content half as ``content_headers``.
        """
        if response.status_code < 200 or response.status_code in NO_BODY_STATUS_CODES:
            return None
        if content_headers is None:
            content_headers, _ = HeaderCollection(response.headers).partition(CONTENT_HEADER_NAMES)
        return cls(response.aiter_bytes(), content_headers)

    @property
    def media_type(self) -> str | None:
        """Declared media type without parameters, lower-cased."""
        media_type, _ = parse_content_type(self.headers.get(CONTENT_TYPE_HEADER))
        return media_type

    @property
    def charset(self) -> str | None:
        """Declared charset parameter, if any."""
        _, params = parse_content_type(self.headers.get(CONTENT_TYPE_HEADER))
        return params.get("charset")

    @property
    def body(self) -> ContentBody:
        """The raw body as handed to the transport."""
        return self._body

    async def iter_chunks(self, token: CancellationToken) -> AsyncIterator[bytes]:
        """Yield the body chunk by chunk.

        Every wait for the next chunk is raced against ``token``, so a
        stalled transport cannot hold a cancelled read. A streamed body can
        only be iterated once unless read_bytes() has buffered it.

        Raises:
            OperationCancelledError: If ``token`` fires before the body is exhausted
        """
        token.raise_if_cancelled("content read")
        if isinstance(self._body, bytes):
            if self._body:
                yield self._body
            return
        chunks = self._body.__aiter__()
        while True:
            chunk = await token.run(_next_chunk(chunks), "content read")
            if chunk is None:
                return
            yield chunk

    async def read_bytes(self, token: CancellationToken) -> bytes:
        """Read the whole body, buffering it for later reads."""
        if not isinstance(self._body, bytes):
            self._body = b"".join([chunk async for chunk in self.iter_chunks(token)])
        return self._body

    async def read_text(self, token: CancellationToken) -> str:
        """Read the whole body as text using the declared charset (UTF-8 if absent)."""
        data = await self.read_bytes(token)
        charset = self.charset or DEFAULT_CHARSET
        try:
            codecs.lookup(charset)
        except LookupError:
            charset = DEFAULT_CHARSET
        return data.decode(charset, errors="replace")

    async def copy_to(self, stream: IO[bytes], token: CancellationToken) -> int:
        """Copy the body into a writable binary stream.

        Returns:
            Number of bytes written
        """
        written = 0
        async for chunk in self.iter_chunks(token):
            stream.write(chunk)
            written += len(chunk)
        return written

    def __repr__(self) -> str:
        return f"Content(media_type={self.media_type!r}, headers={self.headers!r})"


async def _next_chunk(chunks: AsyncIterator[bytes]) -> bytes | None:
    # None marks the end of the stream
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


__all__ = ["Content", "ContentBody", "format_content_type", "parse_content_type"]
