"""
FastAPI authentication and authorization dependencies.

Tokens are AWS Cognito JWTs (RS256) verified against the user pool JWKS.
When ``AUTH_JWT_SECRET`` is configured, HS256 tokens signed with that secret
are accepted instead, which is how local and test environments issue tokens.

The token ``sub`` names a profile; the profile carries the caller's role and
tenant. Callers without a profile are treated as parents.

Usage:
    @router.get("/admin/thing")
    async def admin_thing(user: AuthUser = Depends(require_roles(UserRole.hq_admin))):
        ...
"""

from __future__ import annotations

import time
from typing import Annotated, Any, Dict, Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database import get_session
from empowered_camps.core.database.entities.profiles import Profile
from empowered_camps.core.errors import ForbiddenError, UnauthorizedError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import UserRole
from empowered_camps.core.models.domain.roles import ADMIN_ROLES, role_in
from empowered_camps.server.core.config import settings

from .models import AuthUser

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Cache for the Cognito JWKS
_jwks_cache: Dict[str, Any] = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


async def _fetch_jwks(jwks_url: str) -> Dict[str, Any]:
    """Fetch the user pool JWKS, reusing the cached copy for an hour."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(jwks_url)
            response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug(f"Fetched JWKS from {jwks_url}")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Serve an expired cache rather than locking everyone out
        if not _jwks_cache:
            return {"keys": []}
    return _jwks_cache


async def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Raises:
        UnauthorizedError: The token is malformed, expired, signed by an
            unknown key, or issued for another client.
    """
    cognito = settings.cognito
    try:
        if cognito.jwt_secret:
            claims = jwt.decode(token, cognito.jwt_secret, algorithms=["HS256"], options={"verify_aud": False})
        elif not cognito.jwks_url:
            logger.error("Token received but neither COGNITO_USER_POOL_ID nor AUTH_JWT_SECRET is configured")
            raise UnauthorizedError()
        else:
            kid = jwt.get_unverified_header(token).get("kid")
            jwks = await _fetch_jwks(cognito.jwks_url)
            key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
            if key is None:
                logger.warning(f"No JWKS key matches kid={kid}")
                raise UnauthorizedError()
            claims = jwt.decode(
                token, key, algorithms=["RS256"], issuer=cognito.issuer, options={"verify_aud": False}
            )
    except ExpiredSignatureError:
        logger.info("JWT token has expired")
        raise UnauthorizedError()
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise UnauthorizedError()

    # ID tokens carry the app client in ``aud``, access tokens in ``client_id``
    if cognito.client_id and cognito.client_id not in (claims.get("aud"), claims.get("client_id")):
        logger.warning("JWT issued for a different app client")
        raise UnauthorizedError()
    return claims


async def _resolve_user(claims: Dict[str, Any], session: AsyncSession) -> AuthUser:
    user_id = claims.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise UnauthorizedError()

    profile = await session.get(Profile, user_id)
    email = claims.get("email") or (profile.email if profile else None)
    if profile is None:
        return AuthUser(id=user_id, email=email)
    return AuthUser(id=user_id, email=email, role=profile.role, tenant_id=profile.tenant_id)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthUser:
    """Authenticated caller; 401 when the bearer token is missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    claims = await decode_token(credentials.credentials)
    return await _resolve_user(claims, session)


async def get_optional_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Optional[AuthUser]:
    """Caller when a valid token is sent, otherwise None (guest checkout)."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        claims = await decode_token(credentials.credentials)
    except UnauthorizedError:
        return None
    return await _resolve_user(claims, session)


def require_roles(*roles: UserRole):
    """Dependency factory: 401 without a valid token, 403 when the caller's role is not in ``roles``."""

    async def _require(user: Annotated[AuthUser, Depends(get_current_user)]) -> AuthUser:
        if not role_in(user.role, roles):
            required = [r.value for r in roles]
            logger.info(f"User {user.id} with role {user.role.value} denied; requires one of {required}")
            raise ForbiddenError()
        return user

    return _require


def scoped_tenant_id(user: AuthUser, requested: Optional[str]) -> Optional[str]:
    """Tenant a query runs against: HQ admins choose freely, everyone else is pinned to their own tenant."""
    if user.is_hq_admin:
        return requested
    if not user.tenant_id:
        raise ForbiddenError("No tenant assigned to this account")
    return user.tenant_id


def ensure_tenant_access(user: AuthUser, tenant_id: Optional[str]) -> None:
    """403 unless the caller is HQ or belongs to ``tenant_id``."""
    if user.is_hq_admin:
        return
    if not tenant_id or tenant_id != user.tenant_id:
        raise ForbiddenError()


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_optional_user)]
AdminUser = Annotated[AuthUser, Depends(require_roles(*ADMIN_ROLES))]
HQAdminUser = Annotated[AuthUser, Depends(require_roles(UserRole.hq_admin))]
