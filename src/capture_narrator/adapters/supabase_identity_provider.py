"""Supabase Auth identity provider."""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from supabase import AuthError, Client

from capture_narrator.domain.models import UserRecord
from capture_narrator.services.users import (
    AuthenticationError,
    AuthResult,
    IdentityProvider,
)

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Supabase Auth.

    Uses a client dedicated to auth calls: signing in stores the user's
    session on the client, which must not leak into table access.
    """

    client: Client

    def sign_up(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> AuthResult:
        """Register a new email/password account."""
        try:
            response = self.client.auth.sign_up(
                {"email": email, "password": password, "options": {"data": metadata}}
            )
        except AuthError as exc:
            raise AuthenticationError(str(exc)) from exc
        if response.user is None:
            raise AuthenticationError("Sign-up did not return a user")
        token = response.session.access_token if response.session else None
        return AuthResult(user=_to_user_record(response.user), access_token=token)

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthenticationError(str(exc)) from exc
        if response.user is None or response.session is None:
            raise AuthenticationError("Sign-in did not return a session")
        return AuthResult(
            user=_to_user_record(response.user),
            access_token=response.session.access_token,
        )

    def sign_out(self, access_token: str) -> None:
        """Revoke the token server-side."""
        self.client.auth.admin.sign_out(access_token)

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user for a token, or None when it is invalid or expired."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError:
            logger.info("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return _to_user_record(response.user)


def _to_user_record(user: Any) -> UserRecord:
    metadata = getattr(user, "user_metadata", None) or {}
    photo_url = metadata.get("avatar_url") or metadata.get("picture")
    return UserRecord(
        id=UUID(str(user.id)),
        email=user.email,
        photo_url=photo_url,
    )
