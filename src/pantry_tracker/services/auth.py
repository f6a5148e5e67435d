"""Authentication use cases."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pantry_tracker.domain.models import AuthSession, UserRecord

_logger = logging.getLogger(__name__)


class NotAuthenticatedError(RuntimeError):
    """Raised when an operation needs a signed-in user and there is none."""


class AuthenticationError(RuntimeError):
    """Auth provider failure carrying a user-facing message."""


class AuthGateway(Protocol):
    """Interface to the hosted auth provider."""

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user owning an access token, or None if invalid."""

    def sign_up(
        self, email: str, password: str, redirect_to: str | None
    ) -> UserRecord | None:
        """Register an account and return the created user, if any."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""

    def send_password_reset(self, email: str, redirect_to: str | None) -> None:
        """Send a password reset email."""

    def update_password(self, user_id: UUID, password: str) -> None:
        """Set a new password for a user."""


@dataclass
class AuthService:
    """Application service for account lifecycle actions."""

    gateway: AuthGateway
    email_redirect_url: str | None = None
    password_reset_redirect_url: str | None = None

    def current_user(self, access_token: str | None) -> UserRecord | None:
        """Return the user for an access token, if it is valid."""
        if not access_token:
            return None
        return self.gateway.get_user(access_token)

    def require_user(self, access_token: str | None) -> UserRecord:
        """Return the user for an access token or raise."""
        user = self.current_user(access_token)
        if user is None:
            raise NotAuthenticatedError("Not authenticated")
        return user

    def register(self, email: str, password: str) -> AuthSession:
        """Create an account and sign straight into it."""
        try:
            user = self.gateway.sign_up(email, password, self.email_redirect_url)
        except Exception as exc:
            _logger.exception("Sign up failed")
            reason = str(exc) or "Please try again."
            raise AuthenticationError(f"Registration failed: {reason}") from exc
        if user is None:
            raise AuthenticationError(
                "Registration succeeded but no user was returned. "
                "Please log in manually."
            )
        return self.login(email, password)

    def login(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        try:
            return self.gateway.sign_in(email, password)
        except Exception as exc:
            _logger.exception("Sign in failed")
            raise AuthenticationError(
                "Login failed. Check your credentials."
            ) from exc

    def logout(self, access_token: str) -> None:
        """Sign the token's session out."""
        self.gateway.sign_out(access_token)

    def request_password_reset(self, email: str) -> None:
        """Email a password reset link."""
        try:
            self.gateway.send_password_reset(email, self.password_reset_redirect_url)
        except Exception as exc:
            _logger.exception("Password reset email failed")
            raise AuthenticationError(
                "Could not send the password reset email. Please try again."
            ) from exc

    def update_password(self, access_token: str | None, password: str) -> None:
        """Set a new password for the token's user."""
        user = self.require_user(access_token)
        try:
            self.gateway.update_password(user.id, password)
        except Exception as exc:
            _logger.exception("Password update failed")
            raise AuthenticationError(
                "Could not update the password. Please try again."
            ) from exc
