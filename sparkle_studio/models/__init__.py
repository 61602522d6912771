"""Data models for the Sparkle Studio design pipeline."""

from .attributes import ManualAttributeSelection, NO_GEMSTONE
from .design import CustomizationRequest, GenerationResult, ImagePayload, VariationSet
from .records import JewelrySuggestion, SavedDesign

__all__ = [
    "ManualAttributeSelection",
    "NO_GEMSTONE",
    "CustomizationRequest",
    "GenerationResult",
    "ImagePayload",
    "VariationSet",
    "JewelrySuggestion",
    "SavedDesign",
]
