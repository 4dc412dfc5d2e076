# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every domain error carries a machine-readable code and an HTTP status.
# Messages returned to clients are safe to show: raw provider bodies,
# database messages and token parse errors stay in `log_detail`, which is
# only ever written to the log.
# =============================================================================

import logging
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RistrettoException(Exception):
    """
    Base exception for the Ristretto API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "RISTRETTO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        log_detail: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.log_detail = log_detail
        self.headers = headers

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.log_detail:
            result += f" ({self.log_detail})"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Configuration
# =============================================================================

class ConfigError(RistrettoException):
    """Raised when a required key or secret is missing at the point of use."""

    def __init__(self, setting: str):
        super().__init__(
            message="Server is not configured correctly",
            code="CONFIG_ERROR",
            status_code=500,
            suggestion="Contact the operator of this service",
            log_detail=f"{setting} is not set",
        )
        self.setting = setting


# =============================================================================
# Authentication
# =============================================================================

class AuthErrorKind(str, Enum):
    """Failure classes of the authentication pipeline."""
    INVALID_HEADER = "INVALID_HEADER"
    INVALID_TOKEN = "INVALID_TOKEN"
    PROVISIONING_FAILED = "PROVISIONING_FAILED"


_AUTH_MESSAGES = {
    AuthErrorKind.INVALID_HEADER: "Authorization header with a Bearer token is required",
    AuthErrorKind.INVALID_TOKEN: "Invalid or expired token",
    AuthErrorKind.PROVISIONING_FAILED: "Error processing user",
}


class AuthError(RistrettoException):
    """
    Raised when a request cannot be authenticated.

    Header and token problems are the caller's fault (401); provisioning
    failures are ours (500). The code keeps the three apart in logs.
    """

    def __init__(self, kind: AuthErrorKind, detail: str | None = None):
        is_client_error = kind != AuthErrorKind.PROVISIONING_FAILED
        super().__init__(
            message=_AUTH_MESSAGES[kind],
            code=kind.value,
            status_code=401 if is_client_error else 500,
            log_detail=detail,
            headers={"WWW-Authenticate": "Bearer"} if is_client_error else None,
        )
        self.kind = kind


# =============================================================================
# Request Validation
# =============================================================================

class InvalidRequestError(RistrettoException):
    """Raised when a request field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else None,
        )


class NotFoundError(RistrettoException):
    """Raised when the requested record does not exist."""

    def __init__(self, resource: str, identifier: str | int):
        super().__init__(
            message=f"{resource.capitalize()} not found",
            code=f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            details={"id": str(identifier)},
        )


# =============================================================================
# External Collaborators
# =============================================================================

class ProviderError(RistrettoException):
    """Raised when the places provider is unreachable or answers non-200."""

    def __init__(
        self,
        operation: str,
        log_detail: str,
        upstream_status: int | None = None,
    ):
        super().__init__(
            message="Place data provider is unavailable",
            code="PROVIDER_ERROR",
            status_code=502,
            suggestion="Try again later",
            log_detail=log_detail,
        )
        self.operation = operation
        self.upstream_status = upstream_status


class StorageError(RistrettoException):
    """Raised when a database operation fails."""

    def __init__(self, operation: str, log_detail: str):
        super().__init__(
            message="Database error",
            code="STORAGE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            log_detail=log_detail,
        )
        self.operation = operation


class DuplicateRecordError(StorageError):
    """Raised when an insert violates a unique constraint."""


# =============================================================================
# Exception Handlers
# =============================================================================

async def ristretto_exception_handler(
    request: Request,
    exc: RistrettoException
) -> JSONResponse:
    """
    Convert RistrettoException to JSON response.

    Server-side failures are logged at ERROR, client-side ones at WARNING.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.status_code} {exc}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors (query, path and body).

    Missing or malformed request fields are a 400, never a 422.
    """
    errors = getattr(exc, "errors", None)
    fields = []
    if callable(errors):
        for error in errors():
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            fields.append({
                "field": ".".join(location),
                "message": error.get("msg", "Invalid value"),
            })

    logger.warning(f"{request.method} {request.url.path} -> 400 {fields}")

    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request",
            "code": "VALIDATION_ERROR",
            "errors": fields,
        }
    )
