# =============================================================================
# app/auth/routes.py - User Routes
# =============================================================================
# Sign-up and sign-in happen client-side with Clerk; the first authenticated
# request creates the local user row. These routes expose that row.
# =============================================================================

from fastapi import APIRouter

from app.auth.dependencies import CurrentUserId
from app.dependencies import UserServiceDep
from core.models.user import UserProfile

router = APIRouter()


@router.get("/user", response_model=UserProfile)
def get_current_user_profile(
    user_id: CurrentUserId,
    users: UserServiceDep,
) -> UserProfile:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
        404: If the user row no longer exists
    """
    return users.get_profile(user_id)
