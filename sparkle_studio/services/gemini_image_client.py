"""Gemini API client for jewelry image generation and editing."""

import base64
import binascii
import logging
from typing import Any

import httpx

from ..config import GeminiConfig
from ..errors import GenerationFailed, PermanentError, TransientServiceError
from ..logging_setup import preview
from ..models import GenerationResult, ImagePayload


logger = logging.getLogger(__name__)

# Statuses the service uses for overload / temporary unavailability
TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


class GeminiImageClient:
    """Client for Gemini's generateContent endpoint with image output."""

    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None,
    ):
        self.config = config
        self.api_key = api_key
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    @property
    def model_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/v1beta/models/{self.config.image_model}"

    async def check_connection(self) -> bool:
        """Verify the image model is reachable with the configured key."""
        if not self.api_key:
            return False
        try:
            response = await self.client.get(self.model_url, params={"key": self.api_key})
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def generate(
        self,
        instruction: str,
        base_image: ImagePayload | None = None,
    ) -> GenerationResult:
        """Generate one image.

        Args:
            instruction: Text instruction for the model
            base_image: Optional image to modify. When present it is sent
                before the text, which the model reads as "edit this image".

        Returns:
            GenerationResult holding the image

        Raises:
            GenerationFailed: the response carried no image (including safety blocks)
            TransientServiceError: overload, unavailability or timeout
            PermanentError: any other rejection
        """
        if not self.api_key:
            raise PermanentError("Missing GEMINI_API_KEY")

        payload = self._build_payload(instruction, base_image)
        logger.info(
            f"Requesting image from {self.config.image_model} "
            f"(base image: {base_image is not None}): {preview(instruction)}"
        )

        try:
            response = await self.client.post(
                f"{self.model_url}:generateContent",
                params={"key": self.api_key},
                json=payload,
            )
        except httpx.TimeoutException as e:
            raise TransientServiceError(
                f"Image generation timed out after {self.config.timeout}s"
            ) from e

        self._raise_for_status(response)

        image = self._extract_image(response.json())
        logger.info(f"Image generated ({len(image.data)} bytes, {image.mime_type})")
        return GenerationResult(image=image)

    def _build_payload(
        self,
        instruction: str,
        base_image: ImagePayload | None,
    ) -> dict[str, Any]:
        """Build the generateContent request body.

        Both TEXT and IMAGE modalities are requested; the model may drop the
        image when asked for IMAGE alone. Any returned text is discarded.
        """
        parts: list[dict[str, Any]] = []
        if base_image is not None:
            parts.append({
                "inlineData": {
                    "mimeType": base_image.mime_type,
                    "data": base_image.b64_data,
                }
            })
        parts.append({"text": instruction})

        return {
            "contents": [
                {
                    "role": "user",
                    "parts": parts,
                }
            ],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
            },
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map HTTP errors onto the pipeline's error kinds."""
        if response.is_success:
            return

        status = response.status_code
        message = f"{status} {response.reason_phrase}: {response.text[:500]}"
        if status in TRANSIENT_STATUS_CODES:
            raise TransientServiceError(message, status_code=status)
        raise PermanentError(message, status_code=status)

    def _extract_image(self, data: dict[str, Any]) -> ImagePayload:
        """Pull the first inline image out of a generateContent response."""
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise GenerationFailed(
                f"AI did not return an image. The request was blocked ({block_reason})."
            )

        candidates = data.get("candidates") or []
        if candidates:
            content = (candidates[0] or {}).get("content") or {}
            for part in content.get("parts") or []:
                if not isinstance(part, dict):
                    continue
                inline = part.get("inlineData") or part.get("inline_data")
                if not inline:
                    continue
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                if not mime_type.startswith("image/") or not inline.get("data"):
                    continue
                try:
                    raw = base64.b64decode(inline["data"])
                except (binascii.Error, ValueError) as e:
                    raise GenerationFailed(f"AI returned unreadable image data: {e}") from e
                return ImagePayload(data=raw, mime_type=mime_type)

        raise GenerationFailed(
            "AI did not return an image. The response might have been blocked "
            "or did not contain image data."
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
