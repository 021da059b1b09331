"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Form, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.config import config
from iiifdims.database import get_db
from iiifdims.models import User
from iiifdims.utils.auth import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_user_by_email,
)

router = APIRouter(prefix="/auth", tags=["auth"])


async def get_current_user(
    session_token: Annotated[str | None, Cookie()] = None,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Get current user from session token."""
    if not session_token:
        return None

    email = decode_access_token(session_token)
    if not email:
        return None

    user = await get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    return user


async def require_auth(
    current_user: User | None = Depends(get_current_user),
) -> User:
    """Require authentication."""
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return current_user


@router.post("/login")
async def login(
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Exchange credentials for a session cookie."""
    user = await authenticate_user(db, email, password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    response = JSONResponse({"email": user.email, "is_admin": user.is_admin})
    response.set_cookie(
        key="session_token",
        value=create_access_token(user.email),
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout() -> Response:
    response = JSONResponse({"status": "ok"})
    response.delete_cookie("session_token")
    return response
