"""Helpers for moving images between data URIs, raw bytes and the model."""

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError


# MIME types the image model accepts as inline data
SUPPORTED_MIME_TYPES = {"image/png", "image/jpeg", "image/webp", "image/heic", "image/heif"}


def sniff_mime_type(data: bytes, default: str = "image/png") -> str:
    """Detect the image format from magic bytes."""
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return "image/webp"
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    return default


def split_data_uri(value: str) -> tuple[str | None, bytes]:
    """Decode a data URI or a raw base64 string.

    Returns (mime_type, raw_bytes). mime_type is None for raw base64 input.
    Raises ValueError on malformed input.
    """
    value = value.strip()
    mime_type = None

    if value.startswith("data:"):
        try:
            header, encoded = value.split(",", 1)
        except ValueError:
            raise ValueError("Malformed data URI: missing ',' separator") from None
        # header looks like "data:image/png;base64"
        meta = header[len("data:"):]
        if ";base64" not in meta:
            raise ValueError("Only base64-encoded data URIs are supported")
        mime_type = meta.split(";", 1)[0] or None
    else:
        encoded = value

    try:
        raw = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image data: {e}") from None

    if not raw:
        raise ValueError("Image data is empty")
    return mime_type, raw


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode bytes as a data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def convert_to_png(data: bytes) -> bytes:
    """Re-encode an image as PNG.

    RGBA and palette images are flattened to RGB first. Raises ValueError if
    Pillow cannot read the data.
    """
    try:
        img = Image.open(io.BytesIO(data))
        if img.mode in ('RGBA', 'P', 'LA'):
            img = img.convert('RGB')
        output = io.BytesIO()
        img.save(output, format='PNG')
        return output.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image data: {e}") from None
