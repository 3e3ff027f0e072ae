"""Domain models for users and their preferences."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class Voice(StrEnum):
    """Narration voice selector."""

    MALE = "male"
    FEMALE = "female"


class Theme(StrEnum):
    """UI theme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class FacingMode(StrEnum):
    """Which physical camera is active."""

    USER = "user"
    ENVIRONMENT = "environment"

    def flipped(self) -> "FacingMode":
        """Return the opposite facing mode."""
        if self is FacingMode.USER:
            return FacingMode.ENVIRONMENT
        return FacingMode.USER


@dataclass(frozen=True)
class UserRecord:
    """Represents an authenticated user from the identity provider."""

    id: UUID
    email: str | None
    photo_url: str | None = None


@dataclass(frozen=True)
class UserPreferences:
    """Per-user persisted settings."""

    theme: Theme = Theme.SYSTEM
    voice: Voice = Voice.FEMALE

    def to_dict(self) -> dict[str, str]:
        return {"theme": self.theme.value, "voice": self.voice.value}

    @classmethod
    def from_dict(cls, raw: dict[str, object] | None) -> "UserPreferences":
        """Build preferences from a stored mapping, applying defaults."""
        if not raw:
            return cls()
        theme = raw.get("theme")
        voice = raw.get("voice")
        return cls(
            theme=Theme(theme) if theme in set(Theme) else Theme.SYSTEM,
            voice=Voice(voice) if voice in set(Voice) else Voice.FEMALE,
        )


@dataclass
class CurrentSession:
    """Signed-in user and their live preferences.

    Passed explicitly into the capture pipeline and the regeneration flow.
    Preference writes replace ``preferences`` so open pipelines observe the
    change without re-fetching.
    """

    user: UserRecord
    access_token: str
    preferences: UserPreferences = field(default_factory=UserPreferences)
