"""Prompt Enhancer Agent - expands a rough jewelry idea into an image prompt."""

import logging

from agent_framework import ChatMessage, Content

from ..errors import EmptyResult
from ..logging_setup import preview
from .base import TextAgent


logger = logging.getLogger(__name__)


ENHANCE_SYSTEM = """You are an AI assistant specializing in crafting detailed and vivid prompts for generating images of jewelry.

Your task is to enhance the user's initial idea. Make it more descriptive and evocative. Consider adding details about:
- Specific materials and their appearance (e.g., "polished 18k yellow gold", "lustrous freshwater pearls", "brilliant-cut diamond with fire")
- Gemstone details if mentioned (e.g., cut, color, clarity, setting type like "prong-set oval sapphire")
- Design style and era (e.g., "Art Deco filigree", "minimalist geometric", "organic nature-inspired")
- Textures and finishes (e.g., "hammered texture", "high-polish finish", "delicate engraving")
- Potential ambiance or lighting for the image (e.g., "soft studio lighting", "dramatic spotlight", "natural daylight")
- Overall artistic impression (e.g., "a sense of timeless elegance", "a bold contemporary statement", "ethereal and delicate")

## Rules:
1. Do not make up completely new elements not implied by the original idea, but expand creatively on what is given
2. If the idea is very specific, focus on adding rich visual details and artistic direction
3. If the idea is vague, infer plausible details that would make for a compelling jewelry image
4. If the idea is empty or nonsensical, create a prompt for a beautiful, unique piece of jewelry from scratch

## CRITICAL OUTPUT RULES:
1. Return ONLY the enhanced prompt - a single, cohesive paragraph
2. Do NOT include explanations or commentary
3. Do NOT use markdown formatting"""


class PromptEnhancer(TextAgent):
    """Turns a user's jewelry idea into a richer image-generation prompt."""

    NAME = "JewelryPromptEnhancer"
    INSTRUCTIONS = ENHANCE_SYSTEM

    async def enhance(self, current_prompt: str) -> str:
        """Enhance a prompt.

        Raises:
            EmptyResult: the model returned nothing usable
        """
        logger.info(f"Enhancing prompt: {preview(current_prompt)}")

        message = ChatMessage(
            role="user",
            contents=[Content.from_text(f'Initial idea for a piece of jewelry:\n"{current_prompt}"')],
        )
        enhanced = await self._run(message)

        if not enhanced:
            raise EmptyResult(
                "AI did not return an enhanced prompt. The response might have been empty or an error occurred."
            )

        logger.info(f"Prompt enhanced: {preview(enhanced)}")
        return enhanced
