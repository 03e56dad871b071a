"""
Identity provider client.

Verifies signed bearer tokens issued by the identity provider and exposes
the verified subject (the ``email`` claim) to the rest of the application.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from backend.app.core.config import settings

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """Raised when a bearer token cannot be verified."""


class IdentityProvider:
    """
    Verifies bearer tokens against the provider's signing key.

    Only the claims are trusted after verification; the subject identity
    used for ownership checks is the ``email`` claim.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.audience = audience
        self.issuer = issuer

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a bearer token.

        Args:
            token: Raw token string from the Authorization header

        Returns:
            Verified claims, guaranteed to carry a non-empty ``email``

        Raises:
            IdentityVerificationError: signature, expiry, audience or issuer
                check failed, or the token carries no email claim
        """
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as exc:
            raise IdentityVerificationError(str(exc)) from exc

        if not claims.get("email"):
            raise IdentityVerificationError("Token carries no email claim")

        return claims


identity_provider = IdentityProvider(
    secret_key=settings.identity_secret_key,
    algorithm=settings.identity_algorithm,
    audience=settings.identity_audience,
    issuer=settings.identity_issuer,
)


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the configured identity provider."""
    return identity_provider


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed token the identity provider will accept.

    Used by seeding scripts and tests; production tokens are issued by the
    identity provider itself.

    Args:
        data: Claims to encode (should include: email)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    if settings.identity_audience:
        to_encode.setdefault("aud", settings.identity_audience)
    if settings.identity_issuer:
        to_encode.setdefault("iss", settings.identity_issuer)

    return jwt.encode(to_encode, settings.identity_secret_key, algorithm=settings.identity_algorithm)
