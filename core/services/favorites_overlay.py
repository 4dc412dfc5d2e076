# =============================================================================
# core/services/favorites_overlay.py - Favorite Membership Overlay
# =============================================================================
# Loads the set of place ids a user has favorited so place results can be
# flagged with isFavorite. Favorites are an enrichment: a failed read is
# logged and treated as "no favorites", never as a failed request.
# =============================================================================

import asyncio
import logging

from lib.supabase_client import SupabaseStorage

logger = logging.getLogger(__name__)

EMPTY_FAVORITES: frozenset[str] = frozenset()


class FavoritesOverlay:
    """Read-only favorite lookup that degrades to an empty set."""

    def __init__(self, storage: SupabaseStorage):
        self._storage = storage

    def load(self, user_id: int) -> frozenset[str]:
        """Return the user's favorite place ids, or an empty set on failure."""
        try:
            return frozenset(self._storage.get_favorite_ids(user_id))
        except Exception as e:
            logger.warning(f"Could not load favorites for user {user_id}, continuing without: {e}")
            return EMPTY_FAVORITES

    async def aload(self, user_id: int) -> frozenset[str]:
        """Like load(), with the blocking storage read moved off the event loop."""
        return await asyncio.to_thread(self.load, user_id)
