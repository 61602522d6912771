"""Design pipeline."""

from .design_pipeline import VARIATION_ANGLES, DesignPipeline, build_variation_instructions

__all__ = [
    "VARIATION_ANGLES",
    "DesignPipeline",
    "build_variation_instructions",
]
