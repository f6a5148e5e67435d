"""Auth API endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from pantry_tracker.api.models import (  # noqa: TC001
    Credentials,
    PasswordResetRequest,
    PasswordUpdate,
)
from pantry_tracker.domain.models import AuthSession, UserRecord  # noqa: TC001
from pantry_tracker.services.auth import AuthenticationError

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])
_logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the access token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(
    request: Request, access_token: str | None = Depends(bearer_token)
) -> UserRecord:
    """Resolve the signed-in user or answer 401."""
    container: AppContainer = request.app.state.container
    user = container.auth_service.current_user(access_token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user


@router.post("/register")
async def register(body: Credentials, request: Request) -> dict[str, object]:
    """Create an account and sign into it."""
    container: AppContainer = request.app.state.container
    try:
        session = container.auth_service.register(body.email, body.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return _serialize_session(session)


@router.post("/login")
async def login(body: Credentials, request: Request) -> dict[str, object]:
    """Sign in with email and password."""
    container: AppContainer = request.app.state.container
    try:
        session = container.auth_service.login(body.email, body.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
    return _serialize_session(session)


@router.post("/logout")
async def logout(
    request: Request,
    user: UserRecord = Depends(require_user),
    access_token: str | None = Depends(bearer_token),
) -> dict[str, str]:
    """Sign out and drop the user's dashboard state."""
    container: AppContainer = request.app.state.container
    container.dashboard_service.close(user.id)
    if access_token:
        try:
            container.auth_service.logout(access_token)
        except Exception:
            _logger.exception("Sign out failed", extra={"user_id": str(user.id)})
    return {"status": "ok"}


@router.post("/reset-password")
async def reset_password(
    body: PasswordResetRequest, request: Request
) -> dict[str, str]:
    """Email a password reset link."""
    container: AppContainer = request.app.state.container
    try:
        container.auth_service.request_password_reset(body.email)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {
        "status": "ok",
        "message": "Check your email for the password reset link.",
    }


@router.post("/update-password")
async def update_password(
    body: PasswordUpdate,
    request: Request,
    access_token: str | None = Depends(bearer_token),
) -> dict[str, str]:
    """Set a new password for the token's user."""
    container: AppContainer = request.app.state.container
    try:
        container.auth_service.update_password(access_token, body.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {"status": "ok", "message": "Password updated."}


def _serialize_session(session: AuthSession) -> dict[str, object]:
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "user": {"id": str(session.user.id), "email": session.user.email},
    }
