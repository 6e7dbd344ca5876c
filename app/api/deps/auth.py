"""Authentication dependencies.

Every story endpoint receives a Supabase access token (ES256 JWT). The token
is verified against the project's JWKS, the user row is provisioned on first
sight, and the same identity is written into the request transaction for RLS.
"""

import logging
import time
import uuid as uuid_pkg
from collections.abc import AsyncGenerator
from typing import Annotated, Any

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.backends import ECKey
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.rls import set_rls_user_context
from app.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "ES256"
JWT_AUDIENCE = "authenticated"

# Signing keys rotate rarely; an unknown kid forces an early refresh
_JWKS_CACHE_TTL_SECONDS: float = 3600.0
_jwks_cache: dict[str, Any] = {}
_jwks_cache_timestamp: float = 0.0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def _fetch_jwks() -> dict[str, Any]:
    global _jwks_cache_timestamp
    async with httpx.AsyncClient() as client:
        response = await client.get(settings.supabase_jwks_url)
        response.raise_for_status()
        jwks = response.json()
    _jwks_cache.clear()
    _jwks_cache.update(jwks)
    _jwks_cache_timestamp = time.monotonic()
    return jwks


async def get_jwks(force_refresh: bool = False) -> dict[str, Any]:
    """Return the cached JWKS, fetching it when empty, stale or forced."""
    fresh = time.monotonic() - _jwks_cache_timestamp < _JWKS_CACHE_TTL_SECONDS
    if _jwks_cache and fresh and not force_refresh:
        return _jwks_cache
    return await _fetch_jwks()


def get_signing_key(jwks: dict[str, Any], token: str) -> ECKey:
    """Pick the JWK whose kid matches the token header."""
    kid = jwt.get_unverified_header(token).get("kid")
    match = next((key for key in jwks.get("keys", []) if key.get("kid") == kid), None)
    if match is None:
        raise ValueError("Unable to find matching key in JWKS")
    return ECKey(match, algorithm=JWT_ALGORITHM)


async def decode_token(token: str, force_refresh: bool = False) -> dict[str, Any]:
    """
    Verify signature, algorithm and audience, and return the claims.

    Raises:
        JWTError, ValueError: Token is invalid or signed with an unknown key
        httpx.HTTPError: JWKS could not be fetched
    """
    jwks = await get_jwks(force_refresh=force_refresh)
    return jwt.decode(
        token,
        get_signing_key(jwks, token),
        algorithms=[JWT_ALGORITHM],
        audience=JWT_AUDIENCE,
    )


async def verify_token(token: str) -> dict[str, Any]:
    """
    Decode a token, retrying once with a refreshed JWKS.

    A failure against the cached keys may just mean the signing key rotated.
    Any failure after the refresh, or an unreachable JWKS endpoint, is a 401.
    """
    try:
        return await decode_token(token)
    except httpx.HTTPError as e:
        logger.warning(f"JWKS fetch failed: {e}")
        raise _unauthorized("Could not validate credentials") from e
    except (JWTError, ValueError):
        logger.info("JWT rejected with cached JWKS, retrying with fresh keys")

    try:
        return await decode_token(token, force_refresh=True)
    except (JWTError, ValueError, httpx.HTTPError) as e:
        raise _unauthorized("Could not validate credentials") from e


def _subject_id(claims: dict[str, Any]) -> uuid_pkg.UUID:
    try:
        return uuid_pkg.UUID(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid authentication token") from None


async def _get_or_create_user(
    db: AsyncSession, user_id: uuid_pkg.UUID, claims: dict[str, Any]
) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user:
        return user

    metadata = claims.get("user_metadata") or {}
    user = User(
        id=user_id,
        email=claims.get("email"),
        display_name=metadata.get("full_name") or metadata.get("user_name"),
        avatar_url=metadata.get("avatar_url"),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info(f"Provisioned user {user_id}")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticate the bearer token and return the matching user row."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    claims = await verify_token(credentials.credentials)
    return await _get_or_create_user(db, _subject_id(claims), claims)


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_db_with_rls(
    db: DbSession,
    current_user: CurrentUser,
) -> AsyncGenerator[AsyncSession, None]:
    """
    The request session with the caller's id set for the RLS policies.

    The setting is transaction-local, so it never leaks into another
    request that later reuses the pooled connection.
    """
    await set_rls_user_context(db, current_user.id)
    yield db
