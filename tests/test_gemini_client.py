"""Tests for the image-service HTTP client using httpx.MockTransport."""

import json

import httpx
import pytest

from fitscan.config import GeminiConfig
from fitscan.errors import GenerationServiceError
from fitscan.models import ImageFile
from fitscan.services.gemini_client import GeminiImageClient, image_part, text_part


def make_client(handler, api_key="test-key"):
    return GeminiImageClient(
        config=GeminiConfig(base_url="https://example.test", model="image-model"),
        api_key=api_key,
        transport=httpx.MockTransport(handler),
    )


class TestParts:

    def test_image_part(self):
        part = image_part(ImageFile(data=b"abc", media_type="image/png"))

        assert part == {"inlineData": {"mimeType": "image/png", "data": "YWJj"}}

    def test_text_part(self):
        assert text_part("hello") == {"text": "hello"}


class TestGenerateContent:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["key"] = request.headers.get("x-goog-api-key")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"candidates": []})

        client = make_client(handler)
        parts = [text_part("hi")]

        data = await client.generate_content(parts)
        await client.close()

        assert data == {"candidates": []}
        assert captured["url"] == "https://example.test/v1beta/models/image-model:generateContent"
        assert captured["key"] == "test-key"
        assert captured["body"]["contents"] == [{"role": "user", "parts": parts}]
        assert captured["body"]["generationConfig"]["responseModalities"] == ["IMAGE", "TEXT"]

    @pytest.mark.asyncio
    async def test_no_api_key_header_when_unset(self):
        seen = {}

        def handler(request):
            seen["has_key"] = "x-goog-api-key" in request.headers
            return httpx.Response(200, json={})

        client = make_client(handler, api_key=None)
        await client.generate_content([])

        assert seen["has_key"] is False

    @pytest.mark.asyncio
    async def test_non_200_raises_with_status(self):
        client = make_client(lambda request: httpx.Response(503, text="overloaded"))

        with pytest.raises(GenerationServiceError) as exc_info:
            await client.generate_content([])

        assert exc_info.value.status_code == 503
        assert "overloaded" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(GenerationServiceError, match="timed out"):
            await client.generate_content([])

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)

        with pytest.raises(GenerationServiceError):
            await client.generate_content([])

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(GenerationServiceError, match="malformed"):
            await client.generate_content([])

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self):
        client = make_client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(GenerationServiceError, match="malformed"):
            await client.generate_content([])
