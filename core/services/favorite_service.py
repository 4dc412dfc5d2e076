# =============================================================================
# core/services/favorite_service.py - Favorites Business Logic
# =============================================================================
# Handles the user's saved coffee shops. Adding is an idempotent upsert,
# so repeating the same request never creates a second row.
# =============================================================================

import logging

from app.exceptions import NotFoundError
from core.models.place import NormalizedPlace
from core.models.user import FavoriteCreate
from lib.supabase_client import SupabaseStorage

logger = logging.getLogger(__name__)


class FavoriteService:
    """Service for favorite coffee shop operations."""

    def __init__(self, storage: SupabaseStorage):
        self._storage = storage

    def list_favorites(self, user_id: int) -> list[NormalizedPlace]:
        """Return the user's favorites as places, newest first."""
        return [record.to_place() for record in self._storage.list_favorites(user_id)]

    def add_favorite(self, user_id: int, favorite: FavoriteCreate) -> bool:
        """
        Save a coffee shop for the user.

        Returns:
            True if it was newly added, False if it was already a favorite
        """
        created = self._storage.add_favorite(user_id, favorite)
        if created:
            logger.info(f"User {user_id} favorited {favorite.id}")
        else:
            logger.info(f"User {user_id} already had {favorite.id} as a favorite")
        return created

    def remove_favorite(self, user_id: int, place_id: str) -> None:
        """
        Remove a coffee shop from the user's favorites.

        Raises:
            NotFoundError: If it wasn't a favorite
        """
        removed = self._storage.remove_favorite(user_id, place_id)
        if removed == 0:
            raise NotFoundError("favorite", place_id)
        logger.info(f"User {user_id} removed favorite {place_id}")
