# =============================================================================
# core/models/identity.py - Identity Models
# =============================================================================
# Verified token claims and the per-request Principal built from them.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class VerifiedClaims(BaseModel):
    """
    Claims of a Clerk session token whose signature has been checked.

    Clerk puts the user id in `sub`; the profile claims come from the JWT
    template configured in the Clerk dashboard and may be missing.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    subject: str = Field(..., min_length=1, alias="sub")
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    issuer: Optional[str] = Field(default=None, alias="iss")
    expires_at: Optional[int] = Field(default=None, alias="exp")
    issued_at: Optional[int] = Field(default=None, alias="iat")
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "VerifiedClaims":
        return cls.model_validate({**payload, "raw": payload})


class Principal(BaseModel):
    """
    The authenticated identity of one request.

    Built by the auth dependency after the token is verified and the local
    user row is resolved. Never cached across requests.
    """
    model_config = ConfigDict(frozen=True)

    external_id: str
    local_user_id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
