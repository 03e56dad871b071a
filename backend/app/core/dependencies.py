"""
Authentication dependencies for FastAPI.

This module provides the identity guard protecting routes with bearer tokens.
"""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backend.app.core.exceptions import AuthenticationError, InvalidCredentialsError
from backend.app.core.identity import IdentityProvider, IdentityVerificationError, get_identity_provider

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme (missing credentials handled below as 401)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> dict:
    """
    FastAPI dependency for bearer-token authentication.

    1. Missing or non-Bearer Authorization header -> 401, the identity
       provider is not consulted
    2. Token rejected by the identity provider -> 403
    3. Otherwise the verified claims are returned; ``email`` is the subject

    Args:
        credentials: HTTP Bearer token from request header
        identity_provider: Verifier for the token

    Returns:
        Verified token claims
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    try:
        claims = identity_provider.verify(credentials.credentials)
    except IdentityVerificationError as exc:
        logger.warning(f"Token verification failed: {exc}")
        raise InvalidCredentialsError()

    return claims
