"""JWT login and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lifetracker.core.security import create_access_token, decode_access_token, verify_password
from lifetracker.core.storage import Storage, get_storage
from lifetracker.schemas.auth import CurrentUser, LoginRequest, LoginResponse
from lifetracker.services.users import get_user_by_id, get_user_by_username

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    storage: Annotated[Storage, Depends(get_storage)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT and the user.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = await get_user_by_username(storage, body.username)
    # Same response for unknown user and wrong password so usernames cannot be probed.
    if user is None or not await run_in_threadpool(
        verify_password, body.password, user.password_hash
    ):
        logger.info("Login failed", extra={"username": body.username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    token = create_access_token(user.id, user.username, user.role)
    return LoginResponse(
        token=token,
        user=CurrentUser(id=user.id, username=user.username, role=user.role),
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    storage: Annotated[Storage, Depends(get_storage)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _unauthorized("Invalid token payload")
    user = await get_user_by_id(storage, sub)
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("/me", response_model=CurrentUser)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the principal behind the presented token (lets clients validate a stored token)."""
    return current_user
