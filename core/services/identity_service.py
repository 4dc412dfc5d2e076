# =============================================================================
# core/services/identity_service.py - Local User Provisioning
# =============================================================================
# Maps a verified Clerk identity to a row in the users table, creating the
# row on first sight. This is the only write on the authentication path.
#
# Two first-sight requests for the same user can race; the unique constraint
# on users.clerk_id makes the loser's insert fail, and the loser then reads
# the winner's row instead of failing the request.
# =============================================================================

import logging

from app.exceptions import DuplicateRecordError, StorageError
from core.models.identity import VerifiedClaims
from lib.supabase_client import SupabaseStorage

logger = logging.getLogger(__name__)


class IdentityProvisioner:
    """Resolves (and if needed creates) the local user id for a Clerk user."""

    def __init__(self, storage: SupabaseStorage):
        self._storage = storage

    def ensure_user(self, claims: VerifiedClaims) -> int:
        """
        Return the local user id for the token's subject.

        Args:
            claims: Verified token claims; `subject` is the Clerk user id

        Returns:
            The users.id for this subject

        Raises:
            StorageError: If the lookup or insert fails
        """
        external_id = claims.subject

        user_id = self._storage.get_user_id_by_external_id(external_id)
        if user_id is not None:
            logger.debug(f"User {user_id} found for clerk_id {external_id}")
            return user_id

        logger.info(f"No user for clerk_id {external_id}, creating one")
        try:
            return self._storage.create_user(
                external_id,
                claims.email,
                claims.first_name,
                claims.last_name,
            )
        except DuplicateRecordError:
            logger.info(f"Concurrent insert for clerk_id {external_id}, re-reading")

        user_id = self._storage.get_user_id_by_external_id(external_id)
        if user_id is None:
            raise StorageError(
                "ensure_user",
                f"insert for clerk_id {external_id} conflicted but no row was found",
            )
        return user_id
