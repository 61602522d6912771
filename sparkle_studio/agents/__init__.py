"""LLM agents for the Sparkle Studio pipeline."""

from .jewelry_describer import JewelryDescriber
from .jewelry_suggester import JewelrySuggester
from .prompt_enhancer import PromptEnhancer

__all__ = [
    "JewelryDescriber",
    "JewelrySuggester",
    "PromptEnhancer",
]
