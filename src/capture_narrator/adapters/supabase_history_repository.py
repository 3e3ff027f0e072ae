"""Supabase-backed history repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from capture_narrator.domain.history import HistoryEntry, NewHistoryEntry
from capture_narrator.domain.models import Voice
from capture_narrator.services.history import HistoryRepository

_COLUMNS = (
    "id, user_id, image_url, description, audio_url, location, timestamp, voice_used"
)


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase implementation for history entries."""

    client: Client

    def add_entry(self, user_id: UUID, entry: NewHistoryEntry) -> None:
        """Insert a history row; ``timestamp`` defaults to now() in the table."""
        response = (
            self.client.table("history")
            .insert({"user_id": str(user_id), **entry.to_row()})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save history entry")

    def list_for_user(self, user_id: UUID) -> list[HistoryEntry]:
        """Return a user's entries ordered newest first."""
        response = (
            self.client.table("history")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("timestamp", desc=True)
            .execute()
        )
        return [_row_to_entry(row) for row in response.data or []]

    def get_entry(self, entry_id: UUID) -> HistoryEntry | None:
        """Return an entry by id, if present."""
        response = (
            self.client.table("history")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_entry(response.data[0])

    def update_audio(self, entry_id: UUID, audio_url: str, voice: Voice) -> None:
        """Replace the stored audio and voice for an entry."""
        response = (
            self.client.table("history")
            .update({"audio_url": audio_url, "voice_used": voice.value})
            .eq("id", str(entry_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update history entry audio")


def _row_to_entry(row: dict[str, object]) -> HistoryEntry:
    timestamp_raw = row.get("timestamp")
    return HistoryEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        image_url=str(row.get("image_url") or ""),
        description=str(row.get("description") or ""),
        audio_url=str(row.get("audio_url") or ""),
        location=str(row.get("location") or ""),
        timestamp=(
            datetime.fromisoformat(str(timestamp_raw)) if timestamp_raw else None
        ),
        voice_used=Voice(str(row.get("voice_used") or Voice.FEMALE.value)),
    )
