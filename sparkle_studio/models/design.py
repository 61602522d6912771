"""Request and result models for image generation."""

import base64
from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from ..utils.images import (
    SUPPORTED_MIME_TYPES,
    convert_to_png,
    sniff_mime_type,
    split_data_uri,
    to_data_uri,
)


class ImagePayload(BaseModel):
    """Binary image with its MIME type."""

    data: bytes
    mime_type: str = "image/png"

    @classmethod
    def from_data_uri(cls, value: str) -> "ImagePayload":
        """Build a payload from a data URI or raw base64 string.

        The declared MIME type wins over sniffing. Formats the model does not
        accept (GIF, BMP, ...) are re-encoded as PNG.
        """
        mime_type, raw = split_data_uri(value)
        if mime_type is None:
            mime_type = sniff_mime_type(raw)

        if mime_type not in SUPPORTED_MIME_TYPES:
            return cls(data=convert_to_png(raw), mime_type="image/png")
        return cls(data=raw, mime_type=mime_type)

    @property
    def b64_data(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


class CustomizationRequest(BaseModel):
    """One instruction for the image model, optionally anchored on a base image.

    Without a base image the instruction describes a design from scratch;
    with one it describes a modification of that image.
    """

    instruction: str = Field(min_length=1)
    base_image: ImagePayload | None = None

    @property
    def is_modification(self) -> bool:
        return self.base_image is not None


class GenerationResult(BaseModel):
    """Exactly one generated image."""

    image: ImagePayload
    produced_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def data_uri(self) -> str:
        return self.image.to_data_uri()


class VariationSet(BaseModel):
    """Successful multi-view renders, in generation order.

    Slots are positional (front, back, top-down, 45-degree) among the
    successes only; failed views are simply absent.
    """

    images: list[GenerationResult] = Field(default_factory=list, max_length=4)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def data_uris(self) -> list[str]:
        return [result.data_uri for result in self.images]
