"""External service clients."""

from .design_store import DesignStore, SupabaseDesignStore
from .gemini_image_client import GeminiImageClient

__all__ = [
    "DesignStore",
    "SupabaseDesignStore",
    "GeminiImageClient",
]
