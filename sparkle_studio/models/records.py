"""Suggestion and saved-design records."""

from datetime import datetime

from pydantic import BaseModel, Field


class JewelrySuggestion(BaseModel):
    """One suggested piece for a shopper's search query."""

    type: str = Field(description="e.g., 'necklace', 'ring'")
    style: str = Field(description="e.g., 'modern', 'vintage'")
    material: str = Field(description="e.g., 'gold', 'silver'")
    description: str = Field(default="", description="Short description of the piece")


class SavedDesign(BaseModel):
    """A finished design stored for a user."""

    id: str | int
    user_id: str
    image_data_uri: str
    design_prompt: str
    created_at: datetime | None = None
