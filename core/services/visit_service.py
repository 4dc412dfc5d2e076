# =============================================================================
# core/services/visit_service.py - Visit History
# =============================================================================

import logging

from core.models.user import VisitCreate, VisitRecord
from lib.supabase_client import SupabaseStorage

logger = logging.getLogger(__name__)


class VisitService:
    """Append-only visit log per user."""

    def __init__(self, storage: SupabaseStorage):
        self._storage = storage

    def list_visits(self, user_id: int) -> list[VisitRecord]:
        return self._storage.list_visits(user_id)

    def record_visit(self, user_id: int, visit: VisitCreate) -> None:
        self._storage.add_visit(user_id, visit.id, visit.name)
        logger.info(f"Recorded visit by user {user_id} to {visit.id}")
