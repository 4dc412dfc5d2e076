# =============================================================================
# app/auth/verifier.py - Clerk Token Verification
# =============================================================================
# Verifies RS-signed Clerk session tokens against a PEM public key.
#
# The algorithm named in the token header is checked against the RSA
# signature family before the key is ever handed to the decoder, so a token
# signed with HS256 using the public key as the "secret" is rejected.
#
# Usage:
#   verifier = TokenVerifier(settings.CLERK_JWT_PUBLIC_KEY)
#   claims = verifier.verify(token)
# =============================================================================

import logging

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError
from pydantic import ValidationError

from app.exceptions import AuthError, AuthErrorKind, ConfigError
from core.models.identity import VerifiedClaims

logger = logging.getLogger(__name__)

# RS256, RS384, RS512
RSA_ALGORITHMS = frozenset(ALGORITHMS.RSA_DS)


class TokenVerifier:
    """
    Validates a bearer token and extracts identity claims.

    Pure: no network or storage I/O, nothing cached between calls.
    """

    def __init__(self, public_key: str | None):
        self._public_key = public_key.strip() if public_key else None

    def verify(self, token: str) -> VerifiedClaims:
        """
        Verify a token and return its claims.

        Raises:
            ConfigError: If no public key is configured
            AuthError: INVALID_TOKEN for a malformed, tampered, expired or
                non-RSA token
        """
        if not self._public_key:
            raise ConfigError("CLERK_JWT_PUBLIC_KEY")

        try:
            header = jwt.get_unverified_header(token)
        except JOSEError as e:
            raise AuthError(AuthErrorKind.INVALID_TOKEN, f"malformed token header: {e}")

        algorithm = header.get("alg")
        if not isinstance(algorithm, str) or algorithm not in RSA_ALGORITHMS:
            raise AuthError(
                AuthErrorKind.INVALID_TOKEN,
                f"unexpected signing method: {algorithm}",
            )

        try:
            payload = jwt.decode(
                token,
                self._public_key,
                algorithms=[algorithm],
                options={"verify_aud": False},
            )
        except JOSEError as e:
            raise AuthError(AuthErrorKind.INVALID_TOKEN, str(e))

        try:
            claims = VerifiedClaims.from_payload(payload)
        except ValidationError as e:
            raise AuthError(
                AuthErrorKind.INVALID_TOKEN,
                f"token claims rejected: {e.error_count()} invalid field(s)",
            )

        logger.debug(f"Token verified for subject {claims.subject} (alg={algorithm})")
        return claims
