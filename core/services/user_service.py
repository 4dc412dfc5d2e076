# =============================================================================
# core/services/user_service.py - User Profile
# =============================================================================

from app.exceptions import NotFoundError
from core.models.user import UserProfile
from lib.supabase_client import SupabaseStorage


class UserService:
    """Read access to the local user profile."""

    def __init__(self, storage: SupabaseStorage):
        self._storage = storage

    def get_profile(self, user_id: int) -> UserProfile:
        """
        Get the profile of a local user.

        Raises:
            NotFoundError: If no users row has this id
        """
        profile = self._storage.get_user_profile(user_id)
        if profile is None:
            raise NotFoundError("user", user_id)
        return profile
