"""
Supabase access-token verification.

Tokens are signed with the project's asymmetric keys; the public keys
come from the auth server's JWKS endpoint and are cached until a token
arrives with an unknown kid.
"""

import logging
from functools import lru_cache
from typing import Optional

import httpx
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from waitify.core.config import settings

logger = logging.getLogger(__name__)

# auto_error=False so guest routes can run without a token
bearer_scheme = HTTPBearer(auto_error=False)

ALLOWED_ALGORITHMS = ["RS256", "ES256", "EdDSA"]
AUDIENCE = "authenticated"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@lru_cache(maxsize=1)
def get_jwks() -> dict:
    """Public signing keys of the Supabase project."""
    response = httpx.get(f"{settings.supabase_url}/auth/v1/.well-known/jwks.json", timeout=10.0)
    response.raise_for_status()
    return response.json()


def get_signing_key(kid: str | None) -> dict | None:
    """Look a key up by kid, refetching the JWKS once on a miss."""
    for refresh in (False, True):
        if refresh:
            logger.warning(f"JWT kid={kid} not in cached JWKS, refreshing")
            get_jwks.cache_clear()
        key = next((k for k in get_jwks().get("keys", []) if k.get("kid") == kid), None)
        if key:
            return key
    return None


def verify_jwt(token: str) -> dict:
    """Verify a Supabase access token and return its claims."""
    try:
        header = jwt.get_unverified_header(token)
        alg = header.get("alg")
        if alg not in ALLOWED_ALGORITHMS:
            logger.warning(f"JWT unsupported algorithm: {alg}")
            raise _unauthorized(f"Invalid token: unsupported algorithm {alg}")

        key = get_signing_key(header.get("kid"))
        if not key:
            raise _unauthorized("Invalid token: signing key not found")

        return jwt.decode(token, key, algorithms=[alg], audience=AUDIENCE)
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[dict]:
    """Claims of the caller, or None for anonymous requests."""
    if not credentials:
        return None
    return verify_jwt(credentials.credentials)


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """Claims of the caller; 401 without a bearer token."""
    if not credentials:
        raise _unauthorized("Not authenticated")
    return verify_jwt(credentials.credentials)
