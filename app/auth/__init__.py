# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides Clerk JWT authentication and local user provisioning.
#
# Usage:
#   from app.auth import CurrentUserId
#
#   @router.get("/protected")
#   def protected(user_id: CurrentUserId):
#       return {"user_id": user_id}
# =============================================================================

from app.auth.dependencies import CurrentUserId, get_current_principal, get_current_user_id
from app.auth.verifier import TokenVerifier
from core.models.identity import Principal, VerifiedClaims

__all__ = [
    "CurrentUserId",
    "get_current_principal",
    "get_current_user_id",
    "Principal",
    "VerifiedClaims",
    "TokenVerifier",
]
