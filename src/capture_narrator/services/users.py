"""Sign-up, sign-in and session resolution."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from capture_narrator.domain.models import CurrentSession, UserPreferences, UserRecord
from capture_narrator.services.cache import SessionCache
from capture_narrator.services.preferences import PreferencesService


class AuthenticationError(Exception):
    """Raised when the identity provider rejects credentials or a sign-up."""


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-up or sign-in."""

    user: UserRecord
    access_token: str | None


class IdentityProvider(Protocol):
    """Interface for the external identity provider."""

    def sign_up(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> AuthResult:
        """Create an account and return the new user."""

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password."""

    def sign_out(self, access_token: str) -> None:
        """Revoke a session token."""

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user for a live token, or None when it is dead."""


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def profile_exists(self, user_id: UUID) -> bool:
        """Return True when a profile row exists for the user."""

    def create_profile(
        self,
        user: UserRecord,
        first_name: str,
        last_name: str,
        preferences: dict[str, str],
    ) -> None:
        """Create or merge a profile row for the user."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    identity: IdentityProvider
    profiles: ProfileRepository
    preferences_service: PreferencesService
    sessions: SessionCache

    def sign_up(
        self, email: str, password: str, first_name: str = "", last_name: str = ""
    ) -> AuthResult:
        """Create an account and its profile with default preferences."""
        result = self.identity.sign_up(
            email,
            password,
            {"first_name": first_name, "last_name": last_name},
        )
        self.profiles.create_profile(
            result.user,
            first_name=first_name,
            last_name=last_name,
            preferences=UserPreferences().to_dict(),
        )
        return result

    def sign_in(self, email: str, password: str) -> AuthResult:
        return self.identity.sign_in(email, password)

    def sign_out(self, access_token: str) -> None:
        """Revoke the token and forget its cached session."""
        self.sessions.forget(access_token)
        self.identity.sign_out(access_token)

    def resolve_session(self, access_token: str) -> CurrentSession | None:
        """Return the signed-in session for a token, creating a profile if missing."""
        cached = self.sessions.get(access_token)
        if cached is not None:
            return cached
        user = self.identity.get_user(access_token)
        if user is None:
            return None
        if not self.profiles.profile_exists(user.id):
            self.profiles.create_profile(
                user,
                first_name="",
                last_name="",
                preferences=UserPreferences().to_dict(),
            )
        session = CurrentSession(
            user=user,
            access_token=access_token,
            preferences=self.preferences_service.get(user.id),
        )
        self.sessions.put(session)
        return session
