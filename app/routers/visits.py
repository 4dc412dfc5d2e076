# =============================================================================
# app/routers/visits.py - Visit History Endpoints
# =============================================================================

from fastapi import APIRouter

from app.auth import CurrentUserId
from app.dependencies import VisitServiceDep
from core.models.user import MessageResponse, VisitCreate, VisitsResponse

router = APIRouter()


@router.get("", response_model=VisitsResponse)
def list_visits(user_id: CurrentUserId, visits: VisitServiceDep):
    """List the caller's 50 most recent visits, newest first."""
    return VisitsResponse(visits=visits.list_visits(user_id))


@router.post("", response_model=MessageResponse, status_code=201)
def record_visit(body: VisitCreate, user_id: CurrentUserId, visits: VisitServiceDep):
    """Record a visit to a coffee shop."""
    visits.record_visit(user_id, body)
    return MessageResponse(message="Visit recorded")
