"""Supabase repository for user profiles and preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from capture_narrator.domain.models import UserRecord
from capture_narrator.services.preferences import PreferencesRepository
from capture_narrator.services.users import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository, PreferencesRepository):
    """Supabase implementation for the ``profiles`` table."""

    client: Client

    def profile_exists(self, user_id: UUID) -> bool:
        """Return True when the user has a profile row."""
        response = (
            self.client.table("profiles")
            .select("user_id")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def create_profile(
        self,
        user: UserRecord,
        first_name: str,
        last_name: str,
        preferences: dict[str, str],
    ) -> None:
        """Upsert the profile row, keeping existing rows mergeable."""
        self.client.table("profiles").upsert(
            {
                "user_id": str(user.id),
                "email": user.email,
                "first_name": first_name,
                "last_name": last_name,
                "preferences": preferences,
                "created_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    def get_preferences(self, user_id: UUID) -> dict[str, object] | None:
        """Return the stored preferences mapping for a user."""
        response = (
            self.client.table("profiles")
            .select("preferences")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("preferences")

    def update_preferences(self, user_id: UUID, preferences: dict[str, str]) -> None:
        """Overwrite the user's preferences."""
        self.client.table("profiles").update(
            {
                "preferences": preferences,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", str(user_id)).execute()
