"""Response content strategies.

Each Response subclass decides how the incoming body is consumed.
``headers`` is assigned by the owning Message once the wire response
arrives; read_content() is then called exactly once with the body (or
None when the response has none).

Example:
    >>> response = JsonResponse(dict)
    >>> response.content is None
    True
"""

from __future__ import annotations

import codecs
import io
from typing import IO, Any, Generic, TypeVar

from restwire.cancellation import CancellationToken
from restwire.constants import JSON_MEDIA_TYPE
from restwire.content import Content
from restwire.errors import InvalidArgumentError, SerializationError
from restwire.headers import HeaderCollection
from restwire.observability import get_logger
from restwire.serialization import JsonOptions, load_json

logger = get_logger(__name__)

T = TypeVar("T")

_OWN_BUFFER: Any = object()


class Response:
    """Base response: ignores the body.

    Attributes:
        headers: Response headers (content headers excluded), set after dispatch
    """

    def __init__(self) -> None:
        self.headers: HeaderCollection | None = None

    async def read_content(self, content: Content | None, token: CancellationToken) -> None:
        """Consume the incoming body. The base implementation does nothing."""
        token.raise_if_cancelled("response read")


class EmptyResponse(Response):
    """A response whose body, if any, is discarded."""


class StringResponse(Response):
    """Reads the whole body as text.

    ``content`` stays None when the response has no body.
    """

    def __init__(self) -> None:
        super().__init__()
        self.content: str | None = None

    async def read_content(self, content: Content | None, token: CancellationToken) -> None:
        token.raise_if_cancelled("response read")
        if content is not None:
            self.content = await content.read_text(token)


class JsonResponse(Response, Generic[T]):
    """Deserializes a JSON body into ``content_type``.

    The body is decoded only when its declared media type is exactly
    ``application/json`` (case-insensitive). Any other media type leaves
    ``content`` as None without raising, whatever the status code.
    A declared charset other than UTF-8 is decoded before parsing.

    Raises:
        SerializationError: From read_content(), if a JSON body is malformed
            or does not validate against ``content_type``
    """

    def __init__(self, content_type: type[T], options: JsonOptions | None = None) -> None:
        if content_type is None:
            raise InvalidArgumentError("content_type")
        super().__init__()
        self.content_type = content_type
        self.options = options
        self.content: T | None = None

    async def read_content(self, content: Content | None, token: CancellationToken) -> None:
        token.raise_if_cancelled("response read")
        if content is None:
            return
        if content.media_type != JSON_MEDIA_TYPE:
            logger.debug(
                "restwire.response.json_skipped",
                media_type=content.media_type,
                expected=JSON_MEDIA_TYPE,
            )
            return
        data = await content.read_bytes(token)
        self.content = load_json(_json_text(data, content.charset), self.content_type, self.options)


def _json_text(data: bytes, charset: str | None) -> bytes | str:
    """Decode a JSON body declared in a charset other than UTF-8.

    UTF-8 bodies, and bodies whose charset is unknown, are handed over as
    bytes, the same fallback read_text() applies.
    """
    if not charset:
        return data
    try:
        codec = codecs.lookup(charset)
    except LookupError:
        return data
    if codec.name == "utf-8":
        return data
    try:
        return data.decode(codec.name)
    except UnicodeDecodeError as e:
        raise SerializationError(
            f"body is not valid {charset}",
            media_type=JSON_MEDIA_TYPE,
            cause=e,
            details={"charset": charset},
        ) from e


class HeadResponse(Response):
    """Keeps only headers, including the body's own content headers.

    Attributes:
        content_headers: Headers describing the body (Content-Type, Content-Length, ...)
    """

    def __init__(self) -> None:
        super().__init__()
        self.content_headers = HeaderCollection()

    async def read_content(self, content: Content | None, token: CancellationToken) -> None:
        token.raise_if_cancelled("response read")
        if content is not None:
            self.content_headers = HeaderCollection(content.headers)

    def get_all_headers(self) -> HeaderCollection:
        """Response headers followed by content headers, nothing deduplicated."""
        return HeaderCollection(self.headers).merge(self.content_headers)


class StreamResponse(Response):
    """Copies the body into a binary stream owned by this response.

    Without an explicit ``stream`` an in-memory buffer is allocated. After a
    body has been copied the stream is rewound to position 0. close() (or
    leaving a ``with`` block) releases the stream once; further calls are
    no-ops and ``stream`` becomes None. Passing ``stream=None`` explicitly
    raises InvalidArgumentError.
    """

    def __init__(self, stream: Any = _OWN_BUFFER) -> None:
        if stream is None:
            raise InvalidArgumentError("stream")
        super().__init__()
        self._closed = False
        self.stream: IO[bytes] | None = io.BytesIO() if stream is _OWN_BUFFER else stream

    @property
    def closed(self) -> bool:
        return self._closed

    async def read_content(self, content: Content | None, token: CancellationToken) -> None:
        token.raise_if_cancelled("response read")
        if content is None:
            return
        if self.stream is None:
            raise ValueError("StreamResponse is closed")
        await content.copy_to(self.stream, token)
        self.stream.seek(0)

    def close(self) -> None:
        """Release the owned stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        stream, self.stream = self.stream, None
        if stream is not None:
            stream.close()

    def __enter__(self) -> "StreamResponse":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


__all__ = [
    "EmptyResponse",
    "HeadResponse",
    "JsonResponse",
    "Response",
    "StreamResponse",
    "StringResponse",
]
