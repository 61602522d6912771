"""Jewelry Suggester Agent - recommends pieces for a shopper's search query."""

import json
import logging
from typing import Any

from agent_framework import ChatMessage, Content
from pydantic import ValidationError

from ..models import JewelrySuggestion
from .base import TextAgent


logger = logging.getLogger(__name__)


SUGGEST_SYSTEM = """You are an expert jewelry consultant. Based on the user's search query, suggest jewelry types, styles, and materials they might be interested in. Return at least 3 suggestions.

Return a JSON object with this shape:
{
  "suggestions": [
    {
      "type": "the type of jewelry (necklace, ring, etc.)",
      "style": "the style (modern, vintage, etc.)",
      "material": "the material (gold, silver, etc.)",
      "description": "a short description of the suggested piece"
    }
  ]
}

Return ONLY the JSON object, no explanation."""


class JewelrySuggester(TextAgent):
    """Suggests jewelry for a free-text search query."""

    NAME = "JewelrySuggester"
    INSTRUCTIONS = SUGGEST_SYSTEM

    def _parse_json_response(self, text: str) -> Any:
        """Parse JSON from LLM response, handling markdown code blocks."""
        text = text.strip()
        if text.startswith("```"):
            lines = text.split("\n")
            # Remove first and last lines (```json and ```)
            text = "\n".join(lines[1:-1])

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning(f"Suggestion response was not valid JSON: {text[:200]}")
            return {}

    def _to_suggestions(self, data: Any) -> list[JewelrySuggestion]:
        items = data.get("suggestions", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            logger.warning(f"Suggestion response had no list of suggestions: {data!r:.200}")
            return []

        suggestions = []
        for item in items:
            try:
                suggestions.append(JewelrySuggestion.model_validate(item))
            except ValidationError:
                logger.warning(f"Skipping malformed suggestion: {item!r}")
        return suggestions

    async def suggest(self, search_query: str) -> list[JewelrySuggestion]:
        """Suggest jewelry for a search query.

        Unparsable output yields an empty list; service errors propagate.
        """
        logger.info(f"Suggesting jewelry for query: {search_query!r}")

        message = ChatMessage(
            role="user",
            contents=[Content.from_text(f"Search Query: {search_query}")],
        )
        response_text = await self._run(message)

        suggestions = self._to_suggestions(self._parse_json_response(response_text))
        logger.info(f"Got {len(suggestions)} suggestions")
        return suggestions
