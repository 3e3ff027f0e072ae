"""History entry persistence service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from capture_narrator.domain.history import HistoryEntry, NewHistoryEntry
from capture_narrator.domain.models import Voice


class HistoryRepository(Protocol):
    """Persistence interface for history entries."""

    def add_entry(self, user_id: UUID, entry: NewHistoryEntry) -> None:
        """Insert an entry; the store assigns id and timestamp."""

    def list_for_user(self, user_id: UUID) -> list[HistoryEntry]:
        """Return a user's entries, newest first."""

    def get_entry(self, entry_id: UUID) -> HistoryEntry | None:
        """Return an entry by id, if present."""

    def update_audio(self, entry_id: UUID, audio_url: str, voice: Voice) -> None:
        """Replace an entry's audio and voice."""


@dataclass
class HistoryService:
    """Service for reading and writing history entries."""

    repository: HistoryRepository

    def add_entry(self, user_id: UUID, entry: NewHistoryEntry) -> None:
        self.repository.add_entry(user_id, entry)

    def get_history(self, user_id: UUID) -> list[HistoryEntry]:
        """Return the user's history, newest first."""
        return self.repository.list_for_user(user_id)

    def get_entry(self, user_id: UUID, entry_id: UUID) -> HistoryEntry | None:
        """Return the entry when it exists and belongs to the user."""
        entry = self.repository.get_entry(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def update_audio(self, entry_id: UUID, audio_url: str, voice: Voice) -> None:
        self.repository.update_audio(entry_id, audio_url, voice)
