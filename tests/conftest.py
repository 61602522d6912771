# Test fixtures and configuration
import base64
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sparkle_studio.config import StudioConfig, VariationConfig
from sparkle_studio.models import ImagePayload


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
        0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
        0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
        0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
        0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
        0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
    ])


@pytest.fixture
def png_data_uri(minimal_png_bytes):
    """The minimal PNG as a data URI."""
    return f"data:image/png;base64,{base64.b64encode(minimal_png_bytes).decode()}"


@pytest.fixture
def base_image(minimal_png_bytes):
    """The minimal PNG as an ImagePayload."""
    return ImagePayload(data=minimal_png_bytes, mime_type="image/png")


@pytest.fixture
def studio_config():
    """Config with a dummy key and no external storage."""
    return StudioConfig(
        gemini_api_key="test-key",
        azure_openai_endpoint=None,
        azure_openai_deployment=None,
        supabase_url=None,
        supabase_key=None,
        variations=VariationConfig(parallel=True),
    )


def make_agent_response(text: str):
    """Build an object shaped like an Agent Framework run response."""
    return SimpleNamespace(
        messages=[SimpleNamespace(contents=[SimpleNamespace(text=text)])]
    )


def make_gemini_image_response(image_bytes: bytes, mime_type: str = "image/png", text: str | None = None):
    """Build a generateContent response body carrying one image."""
    parts = []
    if text:
        parts.append({"text": text})
    parts.append({
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(image_bytes).decode(),
        }
    })
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}
