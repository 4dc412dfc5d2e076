# =============================================================================
# lib/supabase_client.py - Supabase Storage Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations on
# the three tables the API owns:
# - users: one row per Clerk user (unique clerk_id)
# - favorite_coffee_shops: unique per (user_id, place_id)
# - visits: append-only, one row per recorded visit
#
# A SupabaseStorage instance is created once at startup and passed to the
# services that need it; nothing in here is a module-level singleton.
#
# Usage:
#   storage = create_storage(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
#   favorite_ids = storage.get_favorite_ids(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from app.exceptions import DuplicateRecordError, StorageError
from core.models.user import FavoriteCreate, FavoriteRecord, UserProfile, VisitRecord

# Set up logging for this module
logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

VISITS_LIMIT = 50


def _is_unique_violation(error: Exception) -> bool:
    return getattr(error, "code", None) == UNIQUE_VIOLATION or UNIQUE_VIOLATION in str(error)


class SupabaseStorage:
    """
    Typed storage-access handle.

    Every method either returns typed records or raises StorageError;
    raw PostgREST errors never leave this class.

    Example:
        storage = SupabaseStorage(create_client(url, key))
        user_id = storage.get_user_id_by_external_id("user_2abc")
    """

    def __init__(self, client: Client):
        self._client = client

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user_id_by_external_id(self, external_id: str) -> int | None:
        """
        Look up the local id of a Clerk user.

        Returns:
            The users.id, or None if no row has this clerk_id

        Raises:
            StorageError: If the query fails
        """
        try:
            response = (
                self._client.table("users")
                .select("id")
                .eq("clerk_id", external_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StorageError("get_user_id_by_external_id", str(e))

        rows = response.data or []
        return int(rows[0]["id"]) if rows else None

    def create_user(
        self,
        external_id: str,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
    ) -> int:
        """
        Insert a user row and return its new id.

        Raises:
            DuplicateRecordError: If a row with this clerk_id already exists
            StorageError: If the insert fails for any other reason
        """
        data = {
            "clerk_id": external_id,
            "email": email or "",
            "first_name": first_name or "",
            "last_name": last_name or "",
        }

        try:
            response = self._client.table("users").insert(data).execute()
        except Exception as e:
            if _is_unique_violation(e):
                raise DuplicateRecordError("create_user", str(e))
            raise StorageError("create_user", str(e))

        if not response.data:
            raise StorageError("create_user", "insert returned no data")

        user_id = int(response.data[0]["id"])
        logger.info(f"Created user {user_id} for clerk_id {external_id}")
        return user_id

    def get_user_profile(self, user_id: int) -> UserProfile | None:
        """Fetch a user row by local id, or None if it doesn't exist."""
        try:
            response = (
                self._client.table("users")
                .select("id, clerk_id, email, first_name, last_name, created_at, updated_at")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StorageError("get_user_profile", str(e))

        rows = response.data or []
        return UserProfile.model_validate(rows[0]) if rows else None

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    def get_favorite_ids(self, user_id: int) -> frozenset[str]:
        """Return the set of place ids the user has favorited."""
        try:
            response = (
                self._client.table("favorite_coffee_shops")
                .select("place_id")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise StorageError("get_favorite_ids", str(e))

        return frozenset(row["place_id"] for row in response.data or [] if row.get("place_id"))

    def list_favorites(self, user_id: int) -> list[FavoriteRecord]:
        """Return the user's favorites, newest first."""
        try:
            response = (
                self._client.table("favorite_coffee_shops")
                .select("place_id, name, latitude, longitude, created_at")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise StorageError("list_favorites", str(e))

        return [FavoriteRecord.model_validate(row) for row in response.data or []]

    def add_favorite(self, user_id: int, favorite: FavoriteCreate) -> bool:
        """
        Upsert a favorite, ignoring an existing (user_id, place_id) row.

        Returns:
            True if a row was inserted, False if it was already there
        """
        data = {
            "user_id": user_id,
            "place_id": favorite.id,
            "name": favorite.name,
            "latitude": favorite.latitude,
            "longitude": favorite.longitude,
        }

        try:
            response = (
                self._client.table("favorite_coffee_shops")
                .upsert(data, on_conflict="user_id,place_id", ignore_duplicates=True)
                .execute()
            )
        except Exception as e:
            if _is_unique_violation(e):
                return False
            raise StorageError("add_favorite", str(e))

        return bool(response.data)

    def remove_favorite(self, user_id: int, place_id: str) -> int:
        """Delete a favorite and return the number of rows removed."""
        try:
            response = (
                self._client.table("favorite_coffee_shops")
                .delete()
                .eq("user_id", user_id)
                .eq("place_id", place_id)
                .execute()
            )
        except Exception as e:
            raise StorageError("remove_favorite", str(e))

        return len(response.data or [])

    # -------------------------------------------------------------------------
    # Visits
    # -------------------------------------------------------------------------

    def list_visits(self, user_id: int, limit: int = VISITS_LIMIT) -> list[VisitRecord]:
        """Return the user's most recent visits, newest first."""
        try:
            response = (
                self._client.table("visits")
                .select("place_id, name, visited_at")
                .eq("user_id", user_id)
                .order("visited_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise StorageError("list_visits", str(e))

        return [VisitRecord.model_validate(row) for row in response.data or []]

    def add_visit(self, user_id: int, place_id: str, name: str) -> None:
        """Append a visit row; visited_at is set by the database."""
        data: dict[str, Any] = {"user_id": user_id, "place_id": place_id, "name": name}

        try:
            self._client.table("visits").insert(data).execute()
        except Exception as e:
            raise StorageError("add_visit", str(e))

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def ping(self) -> None:
        """Run the cheapest possible query; raises StorageError if it fails."""
        try:
            self._client.table("users").select("id").limit(1).execute()
        except Exception as e:
            raise StorageError("ping", str(e))


def create_storage(supabase_url: str, service_key: str) -> SupabaseStorage:
    """
    Create a storage handle backed by a new Supabase client.

    Uses the service_role key, which bypasses Row Level Security. Every
    query in SupabaseStorage filters by user_id explicitly.

    Raises:
        StorageError: If the client cannot be created
    """
    try:
        client = create_client(supabase_url, service_key)
    except Exception as e:
        raise StorageError("create_client", f"Failed to create Supabase client: {e}")

    logger.info("Supabase client initialized successfully")
    return SupabaseStorage(client)
