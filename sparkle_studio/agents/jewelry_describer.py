"""Jewelry Describer Agent - writes listing copy for a jewelry image."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from agent_framework import ChatMessage, Content

from ..config import RetryConfig
from ..logging_setup import preview
from ..models import ImagePayload
from ..utils.retry import with_retry
from .base import TextAgent


logger = logging.getLogger(__name__)


DESCRIBE_SYSTEM = """You are a master jeweler and an eloquent creative writer.

Look at the jewelry piece in the provided image and write a compelling, elegant description of it.

Focus on:
- Style and overall design
- Materials and finishes
- Prominent features such as gemstones, shapes, and textures
- Craftsmanship
- The overall impression the piece creates

Make it sound appealing, luxurious, and unique.

## OUTPUT RULES:
1. Return ONLY the description - a single short paragraph suitable for a product listing or showcase
2. Do NOT use markdown formatting
3. Do NOT ask questions or add commentary"""


class JewelryDescriber(TextAgent):
    """Describes a jewelry image, retrying while the service is overloaded."""

    NAME = "JewelryDescriber"
    INSTRUCTIONS = DESCRIBE_SYSTEM

    def __init__(
        self,
        endpoint: str | None = None,
        deployment: str | None = None,
        retry: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        super().__init__(endpoint=endpoint, deployment=deployment)
        self.retry = retry or RetryConfig()
        self._sleep = sleep

    def _build_message(self, image: ImagePayload) -> ChatMessage:
        return ChatMessage(
            role="user",
            contents=[
                Content.from_text("Image of the jewelry:"),
                Content.from_data(data=image.data, media_type=image.mime_type),
            ],
        )

    async def _describe_once(self, image: ImagePayload) -> str:
        return await self._run(self._build_message(image))

    async def describe(self, image: ImagePayload) -> str:
        """Generate a description for a jewelry image.

        Args:
            image: The jewelry image

        Returns:
            A non-empty description

        Raises:
            EmptyResult: every attempt came back empty
            Exception: the service error, after retries for transient ones
        """
        logger.info(f"Describing jewelry image ({image.mime_type}, {len(image.data)} bytes)")

        description = await with_retry(
            lambda: self._describe_once(image),
            max_attempts=self.retry.max_attempts,
            delay=self.retry.delay,
            is_empty=lambda text: not text,
            sleep=self._sleep,
        )

        logger.info(f"Description generated: {preview(description)}")
        return description
