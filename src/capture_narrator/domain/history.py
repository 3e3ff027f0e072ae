"""Domain models for narrated history entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from capture_narrator.domain.models import Voice


@dataclass(frozen=True)
class NewHistoryEntry:
    """Entry payload written at pipeline completion; id and timestamp come from the store."""

    image_url: str
    description: str
    audio_url: str
    location: str
    voice_used: Voice

    def to_row(self) -> dict[str, str]:
        return {
            "image_url": self.image_url,
            "description": self.description,
            "audio_url": self.audio_url,
            "location": self.location,
            "voice_used": self.voice_used.value,
        }


@dataclass(frozen=True)
class HistoryEntry:
    """Represents a persisted history entry."""

    id: UUID
    user_id: UUID
    image_url: str
    description: str
    audio_url: str
    location: str
    timestamp: datetime | None
    voice_used: Voice


def format_time_ago(timestamp: datetime | None, now: datetime | None = None) -> str:
    """Render a coarse relative age such as ``"5 minutes ago"``."""
    if timestamp is None:
        return "just now"
    current = now or datetime.now(tz=UTC)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    seconds = int((current - timestamp).total_seconds())
    if seconds < 45:
        return "less than a minute ago"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = round(seconds / size)
            suffix = "" if count == 1 else "s"
            return f"{count} {unit}{suffix} ago"
    return "1 minute ago"
