"""HTTP client for the Gemini generateContent image endpoint."""

import logging
import time
from typing import Any

import httpx

from ..config import GeminiConfig
from ..errors import GenerationServiceError
from ..models import ImageFile

logger = logging.getLogger(__name__)


def image_part(image: ImageFile) -> dict[str, Any]:
    """Inline image part (raw bytes as base64 + media type)."""
    return {
        "inlineData": {
            "mimeType": image.media_type,
            "data": image.to_base64(),
        }
    }


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


class GeminiImageClient:
    """Client for the image-generation service.

    Sends one ordered list of parts and returns the decoded JSON response.
    Every transport, status and decoding failure is raised as
    ``GenerationServiceError``; interpreting the response is left to the
    caller.
    """

    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def build_body(self, parts: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": parts,
                }
            ],
            "generationConfig": {
                "responseModalities": ["IMAGE", "TEXT"],
            },
        }

    async def generate_content(self, parts: list[dict[str, Any]]) -> dict[str, Any]:
        """POST one request and return the parsed response body."""
        endpoint = self.config.endpoint
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        start = time.monotonic()
        logger.info("Requesting %s with %d parts", endpoint, len(parts))

        try:
            response = await self.client.post(endpoint, json=self.build_body(parts), headers=headers)
        except httpx.TimeoutException as e:
            raise GenerationServiceError(
                f"Image service timed out after {self.config.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationServiceError(f"Could not reach image service: {e}") from e

        if response.status_code != 200:
            error_text = response.text[:500] if response.text else "No error message"
            logger.error("Image service returned %s: %s", response.status_code, error_text)
            raise GenerationServiceError(
                f"Image service error {response.status_code}: {error_text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationServiceError("Image service returned a malformed response") from e

        if not isinstance(data, dict):
            raise GenerationServiceError("Image service returned a malformed response")

        logger.info("Image service responded in %.2fs", time.monotonic() - start)
        return data

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
