"""Supabase Auth adapter."""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from supabase import AuthError, Client

from pantry_tracker.domain.models import AuthSession, UserRecord
from pantry_tracker.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway over the Supabase Auth API.

    Uses a client created with the service key so admin calls can act on a
    user identified by a verified access token.
    """

    client: Client

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user owning an access token, or None if rejected."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Access token rejected: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return _parse_user(response.user)

    def sign_up(
        self, email: str, password: str, redirect_to: str | None
    ) -> UserRecord | None:
        """Register an account."""
        credentials: dict[str, object] = {"email": email, "password": password}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}
        response = self.client.auth.sign_up(credentials)
        if response.user is None:
            return None
        return _parse_user(response.user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        response = self.client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        if response.session is None or response.user is None:
            raise RuntimeError("Supabase returned no session")
        return AuthSession(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            user=_parse_user(response.user),
        )

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        self.client.auth.admin.sign_out(access_token)

    def send_password_reset(self, email: str, redirect_to: str | None) -> None:
        """Send a password reset email."""
        options = {"redirect_to": redirect_to} if redirect_to else {}
        self.client.auth.reset_password_for_email(email, options)

    def update_password(self, user_id: UUID, password: str) -> None:
        """Set a new password for a user."""
        self.client.auth.admin.update_user_by_id(
            str(user_id), {"password": password}
        )


def _parse_user(user: Any) -> UserRecord:  # noqa: ANN401
    return UserRecord(
        id=UUID(str(user.id)),
        email=user.email,
    )
