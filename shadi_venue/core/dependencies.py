"""
FastAPI dependencies for authentication
"""
import logging
from typing import Optional

from fastapi import HTTPException, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from .config import (
    SECRET_KEY, ALGORITHM, JWT_AUDIENCE, JWT_ISSUER, AUTH_COOKIE_NAME,
    ADMIN_ROLES, ROLE_USER
)

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """Verify the token signature and standard claims, return the payload"""
    return jwt.decode(
        token,
        SECRET_KEY,
        algorithms=[ALGORITHM],
        audience=JWT_AUDIENCE,
        issuer=JWT_ISSUER,
        options={"verify_aud": JWT_AUDIENCE is not None, "require_exp": True},
    )


def _read_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else request.cookies.get(AUTH_COOKIE_NAME)


def verify_token(token: str) -> Optional[dict]:
    """Verified payload carrying a role, None for a token that cannot be trusted"""
    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        return None

    if not payload.get("role"):
        logger.warning("Rejected token without role claim")
        return None
    return payload


async def get_optional_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[dict]:
    """
    Verified payload from the bearer header or the auth cookie.

    Public routes use this; an expired or invalid token makes the caller
    anonymous instead of failing the request.
    """
    token = _read_token(request, credentials)
    if not token:
        return None
    return verify_token(token)


async def get_current_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """Require an authenticated caller"""
    token = _read_token(request, credentials)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_token(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return payload


def can_manage_invite(auth: Optional[dict], invite_id: str) -> bool:
    """Admins manage every invite, a user only the invite matching their roleId"""
    if not auth:
        return False
    role = auth.get("role")
    if role in ADMIN_ROLES:
        return True
    return role == ROLE_USER and bool(auth.get("roleId")) and auth.get("roleId") == invite_id


def ensure_invite_access(auth: dict, invite_id: str) -> None:
    if not can_manage_invite(auth, invite_id):
        logger.warning(f"Role {auth.get('role')} denied access to invite {invite_id}")
        raise HTTPException(status_code=403, detail="You don't have permission to manage this invite")


def invite_manager(param_name: str):
    """Dependency factory guarding routes whose path carries the invite id"""

    async def dependency(request: Request, auth: dict = Depends(get_current_auth)) -> dict:
        ensure_invite_access(auth, request.path_params[param_name])
        return auth

    return dependency
