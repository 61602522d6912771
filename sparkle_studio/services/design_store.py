"""Saved-design persistence backed by Supabase."""

import logging
from typing import Any, Protocol

from supabase import Client, create_client

from ..errors import DesignStoreError
from ..models import SavedDesign


logger = logging.getLogger(__name__)


class DesignStore(Protocol):
    """Where finished designs go."""

    def save(self, user_id: str, image_data_uri: str, design_prompt: str) -> SavedDesign: ...

    def list_for_user(self, user_id: str) -> list[SavedDesign]: ...


class SupabaseDesignStore:
    """Stores designs in the `saved_designs` table."""

    COLUMNS = "id, user_id, image_data_uri, design_prompt, created_at"

    def __init__(self, url: str, key: str, table: str = "saved_designs"):
        self.url = url
        self.key = key
        self.table = table
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        """Get or create the Supabase client."""
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client

    def save(self, user_id: str, image_data_uri: str, design_prompt: str) -> SavedDesign:
        """Insert a design and return the stored row."""
        if not user_id or not image_data_uri or not design_prompt:
            raise ValueError("User ID, image data URI, and design prompt are required.")

        logger.info(f"Saving design for user {user_id}")
        try:
            response = (
                self.client.table(self.table)
                .insert({
                    "user_id": user_id,
                    "image_data_uri": image_data_uri,
                    "design_prompt": design_prompt,
                })
                .execute()
            )
        except Exception as e:
            logger.exception("Supabase error saving design")
            raise DesignStoreError(f"Failed to save design: {e}") from e

        rows: list[dict[str, Any]] = response.data or []
        if not rows:
            raise DesignStoreError("Failed to save design: no confirmation data received from database.")
        return SavedDesign.model_validate(rows[0])

    def list_for_user(self, user_id: str) -> list[SavedDesign]:
        """Return a user's designs, newest first."""
        if not user_id:
            raise ValueError("User ID is required to fetch saved designs.")

        try:
            response = (
                self.client.table(self.table)
                .select(self.COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.exception("Supabase error fetching saved designs")
            raise DesignStoreError(f"Failed to fetch saved designs: {e}") from e

        return [SavedDesign.model_validate(row) for row in response.data or []]
