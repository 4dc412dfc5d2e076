# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Every protected request goes through the same two sequential steps:
# 1. Verify the Clerk bearer token (RSA signature, expiry)
# 2. Resolve the local user row, creating it on first sight
#
# The resulting Principal is attached to request.state and returned, so a
# handler that depends on it can never run unauthenticated.
#
# Usage:
#   from app.auth import get_current_user_id
#
#   @router.get("/protected")
#   def protected(user_id: int = Depends(get_current_user_id)):
#       return {"user_id": user_id}
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.verifier import TokenVerifier
from app.dependencies import SettingsDep, StorageDep
from app.exceptions import AuthError, AuthErrorKind, InvalidRequestError, StorageError
from core.models.identity import Principal
from core.services.identity_service import IdentityProvisioner

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; errors are raised by us so they carry our codes
security = HTTPBearer(auto_error=False)


def get_token_verifier(settings: SettingsDep) -> TokenVerifier:
    return TokenVerifier(settings.CLERK_JWT_PUBLIC_KEY)


def get_identity_provisioner(storage: StorageDep) -> IdentityProvisioner:
    return IdentityProvisioner(storage)


def get_current_principal(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    provisioner: Annotated[IdentityProvisioner, Depends(get_identity_provisioner)],
) -> Principal:
    """
    Authenticate the request and resolve the local user.

    Sync, so FastAPI runs it in the threadpool (the storage calls block).

    Raises:
        AuthError: INVALID_HEADER or INVALID_TOKEN (401), PROVISIONING_FAILED (500)
        ConfigError: If the verification key is not configured (500)
    """
    if credentials is None or not credentials.credentials:
        raise AuthError(AuthErrorKind.INVALID_HEADER, "missing or non-Bearer Authorization header")

    claims = verifier.verify(credentials.credentials)

    try:
        user_id = provisioner.ensure_user(claims)
    except StorageError as e:
        raise AuthError(AuthErrorKind.PROVISIONING_FAILED, f"{e.operation}: {e.log_detail}")

    principal = Principal(
        external_id=claims.subject,
        local_user_id=user_id,
        email=claims.email,
        first_name=claims.first_name,
        last_name=claims.last_name,
    )
    request.state.principal = principal

    logger.debug(f"Authenticated clerk_id {principal.external_id} as user {user_id}")
    return principal


def get_current_user_id(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> int:
    """
    Get the local user id of the authenticated caller.

    Raises:
        InvalidRequestError: If the principal carries no usable id (400)
    """
    user_id = principal.local_user_id
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidRequestError("Invalid user ID", field="user_id")
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
