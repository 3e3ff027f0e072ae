"""User preferences service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from capture_narrator.domain.models import CurrentSession, Theme, UserPreferences, Voice


class PreferencesRepository(Protocol):
    """Persistence interface for user preferences."""

    def get_preferences(self, user_id: UUID) -> dict[str, object] | None:
        """Return the stored preferences mapping, if any."""

    def update_preferences(self, user_id: UUID, preferences: dict[str, str]) -> None:
        """Overwrite the stored preferences mapping."""


@dataclass
class PreferencesService:
    """Service for per-user preferences."""

    repository: PreferencesRepository

    def get(self, user_id: UUID) -> UserPreferences:
        """Return stored preferences with defaults applied."""
        return UserPreferences.from_dict(self.repository.get_preferences(user_id))

    def update(
        self,
        session: CurrentSession,
        *,
        theme: Theme | None = None,
        voice: Voice | None = None,
    ) -> UserPreferences:
        """Merge changes into the session's preferences and persist them."""
        changes: dict[str, object] = {}
        if theme is not None:
            changes["theme"] = theme
        if voice is not None:
            changes["voice"] = voice
        updated = replace(session.preferences, **changes)
        self.repository.update_preferences(session.user.id, updated.to_dict())
        session.preferences = updated
        return updated
