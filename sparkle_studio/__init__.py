"""Sparkle Studio - generative jewelry design pipeline."""

from .config import StudioConfig, load_config
from .pipeline import DesignPipeline

__version__ = "1.0.0"

__all__ = [
    "StudioConfig",
    "load_config",
    "DesignPipeline",
]
