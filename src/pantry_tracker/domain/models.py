"""Domain models for users and auth sessions."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents an authenticated Supabase user."""

    id: UUID
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Tokens issued by a successful sign-in."""

    access_token: str
    refresh_token: str
    user: UserRecord
