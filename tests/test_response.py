"""Tests for the response content strategies."""

import asyncio
import io
from collections.abc import AsyncIterator

import pytest

from restwire.cancellation import CancellationToken
from restwire.content import Content
from restwire.errors import InvalidArgumentError, OperationCancelledError, SerializationError
from restwire.headers import HeaderCollection
from restwire.response import (
    EmptyResponse,
    HeadResponse,
    JsonResponse,
    Response,
    StreamResponse,
    StringResponse,
)
from restwire.serialization import JsonOptions
from tests.factories import Item, StalledStream


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


def json_content(body: bytes, content_type: str = "application/json") -> Content:
    return Content(body, {"Content-Type": content_type})


class _FailingStream:
    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        yield b"partial"
        raise ConnectionResetError("peer went away")


class TestEmptyResponse:
    """Tests for responses that discard the body."""

    async def test_ignores_body(self, token: CancellationToken) -> None:
        response = EmptyResponse()
        await response.read_content(Content(b"ignored"), token)
        assert response.headers is None

    async def test_base_response_accepts_missing_body(self, token: CancellationToken) -> None:
        await Response().read_content(None, token)


class TestStringResponse:
    """Tests for text responses."""

    async def test_reads_body_as_text(self, token: CancellationToken) -> None:
        response = StringResponse()
        await response.read_content(
            Content("grüße".encode("utf-8"), {"Content-Type": "text/plain"}), token
        )
        assert response.content == "grüße"

    async def test_missing_body_leaves_content_unset(self, token: CancellationToken) -> None:
        response = StringResponse()
        await response.read_content(None, token)
        assert response.content is None

    async def test_cancelled_token_raises(self) -> None:
        token = CancellationToken()
        token.cancel()
        response = StringResponse()
        with pytest.raises(OperationCancelledError):
            await response.read_content(Content(b"x"), token)
        assert response.content is None


class TestJsonResponse:
    """Tests for JSON responses gated on the media type."""

    def test_none_content_type_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            JsonResponse(None)  # type: ignore[arg-type]

    async def test_deserializes_model(self, token: CancellationToken) -> None:
        response = JsonResponse(Item)
        await response.read_content(json_content(b'{"name": "bolt", "quantity": 2}'), token)
        assert response.content == Item(name="bolt", quantity=2)

    @pytest.mark.parametrize(
        "content_type",
        ["application/json", "APPLICATION/JSON", "Application/Json; charset=utf-8"],
    )
    async def test_media_type_match_is_case_insensitive(
        self, token: CancellationToken, content_type: str
    ) -> None:
        response = JsonResponse(dict)
        await response.read_content(json_content(b'{"a": 1}', content_type), token)
        assert response.content == {"a": 1}

    @pytest.mark.parametrize(
        "content_type",
        ["text/plain", "application/problem+json", "application/jsonp", "text/json"],
    )
    async def test_other_media_types_are_skipped_silently(
        self, token: CancellationToken, content_type: str
    ) -> None:
        response = JsonResponse(dict)
        await response.read_content(json_content(b'{"a": 1}', content_type), token)
        assert response.content is None

    async def test_missing_content_type_is_skipped(self, token: CancellationToken) -> None:
        response = JsonResponse(dict)
        await response.read_content(Content(b'{"a": 1}'), token)
        assert response.content is None

    async def test_missing_body_leaves_content_unset(self, token: CancellationToken) -> None:
        response = JsonResponse(Item)
        await response.read_content(None, token)
        assert response.content is None

    async def test_malformed_json_raises_serialization_error(
        self, token: CancellationToken
    ) -> None:
        response = JsonResponse(Item)
        with pytest.raises(SerializationError) as exc_info:
            await response.read_content(json_content(b"{not json"), token)
        assert exc_info.value.media_type == "application/json"
        assert exc_info.value.cause is not None
        assert response.content is None

    async def test_validation_failure_raises_serialization_error(
        self, token: CancellationToken
    ) -> None:
        response = JsonResponse(Item)
        with pytest.raises(SerializationError) as exc_info:
            await response.read_content(json_content(b'{"quantity": "many"}'), token)
        assert exc_info.value.details["errors"]

    async def test_strict_option(self, token: CancellationToken) -> None:
        lax = JsonResponse(Item)
        await lax.read_content(json_content(b'{"name": "a", "quantity": "3"}'), token)
        assert lax.content == Item(name="a", quantity=3)

        strict = JsonResponse(Item, options=JsonOptions(strict=True))
        with pytest.raises(SerializationError):
            await strict.read_content(json_content(b'{"name": "a", "quantity": "3"}'), token)

    @pytest.mark.parametrize("charset", ["utf-16", "utf-32", "latin-1"])
    async def test_declared_charset_is_decoded(self, token: CancellationToken, charset: str) -> None:
        response = JsonResponse(Item)
        body = '{"name": "caf\u00e9"}'.encode(charset)
        await response.read_content(json_content(body, f"application/json; charset={charset}"), token)
        assert response.content == Item(name="caf\u00e9")

    async def test_body_invalid_for_declared_charset(self, token: CancellationToken) -> None:
        response = JsonResponse(Item)
        with pytest.raises(SerializationError) as exc_info:
            await response.read_content(json_content(b"{", "application/json; charset=utf-16"), token)
        assert exc_info.value.details["charset"] == "utf-16"
        assert response.content is None

    async def test_unknown_charset_is_read_as_utf8(self, token: CancellationToken) -> None:
        response = JsonResponse(Item)
        await response.read_content(
            json_content(b'{"name": "a"}', "application/json; charset=x-unknown"), token
        )
        assert response.content == Item(name="a")

    async def test_generic_container_types(self, token: CancellationToken) -> None:
        response: JsonResponse[list[Item]] = JsonResponse(list[Item])
        await response.read_content(json_content(b'[{"name": "a"}, {"name": "b"}]'), token)
        assert response.content == [Item(name="a"), Item(name="b")]


class TestHeadResponse:
    """Tests for header-only responses."""

    async def test_captures_content_headers(self, token: CancellationToken) -> None:
        response = HeadResponse()
        response.headers = HeaderCollection({"X-Request-Id": "1"})
        await response.read_content(
            Content(b"", [("Content-Type", "text/plain"), ("Content-Length", "10")]), token
        )
        assert response.content_headers.get("content-length") == "10"

    async def test_get_all_headers_orders_response_headers_first(
        self, token: CancellationToken
    ) -> None:
        response = HeadResponse()
        response.headers = HeaderCollection([("X-Request-Id", "1"), ("Content-Language", "de")])
        await response.read_content(
            Content(b"", [("Content-Type", "text/plain"), ("Content-Language", "en")]), token
        )
        merged = response.get_all_headers()
        assert list(merged) == ["X-Request-Id", "Content-Language", "Content-Type"]
        assert merged.get_values("content-language") == ["de", "en"]

    async def test_missing_body_keeps_empty_content_headers(
        self, token: CancellationToken
    ) -> None:
        response = HeadResponse()
        response.headers = HeaderCollection({"X-Request-Id": "1"})
        await response.read_content(None, token)
        assert len(response.content_headers) == 0
        assert response.get_all_headers() == response.headers

    def test_get_all_headers_before_dispatch(self) -> None:
        assert len(HeadResponse().get_all_headers()) == 0


class TestStreamResponse:
    """Tests for stream responses and stream ownership."""

    def test_default_stream_is_owned_buffer(self) -> None:
        response = StreamResponse()
        assert isinstance(response.stream, io.BytesIO)
        assert not response.closed

    def test_explicit_none_stream_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            StreamResponse(None)
        assert exc_info.value.argument == "stream"

    async def test_copies_body_and_rewinds(self, token: CancellationToken) -> None:
        response = StreamResponse()
        await response.read_content(Content(b"0123456789"), token)
        assert response.stream is not None
        assert response.stream.tell() == 0
        assert response.stream.read() == b"0123456789"

    async def test_explicit_stream_receives_body(self, token: CancellationToken) -> None:
        target = io.BytesIO()
        response = StreamResponse(target)
        await response.read_content(Content(b"abc"), token)
        assert response.stream is target
        assert target.getvalue() == b"abc"

    async def test_missing_body_leaves_stream_untouched(self, token: CancellationToken) -> None:
        target = io.BytesIO(b"seed")
        target.seek(4)
        response = StreamResponse(target)
        await response.read_content(None, token)
        assert target.tell() == 4

    def test_close_is_idempotent(self) -> None:
        target = io.BytesIO()
        response = StreamResponse(target)
        response.close()
        response.close()
        assert response.closed
        assert response.stream is None
        assert target.closed

    def test_context_manager_releases_stream(self) -> None:
        target = io.BytesIO()
        with StreamResponse(target) as response:
            assert response.stream is target
        assert target.closed
        assert response.stream is None

    async def test_stream_released_when_copy_fails(self, token: CancellationToken) -> None:
        target = io.BytesIO()
        with pytest.raises(ConnectionResetError):
            with StreamResponse(target) as response:
                await response.read_content(Content(_FailingStream()), token)
        assert target.closed

    async def test_cancel_during_copy_leaves_stream_closable(self) -> None:
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.05, token.cancel)
        response = StreamResponse()
        with pytest.raises(OperationCancelledError) as exc_info:
            await asyncio.wait_for(response.read_content(Content(StalledStream()), token), timeout=5.0)
        assert exc_info.value.stage == "content read"
        assert response.stream is not None
        assert response.stream.getvalue() == b"first"
        response.close()
        assert response.closed

    async def test_read_after_close_raises(self, token: CancellationToken) -> None:
        response = StreamResponse()
        response.close()
        with pytest.raises(ValueError):
            await response.read_content(Content(b"x"), token)
