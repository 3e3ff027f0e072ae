"""User-facing notification and playback channel."""

from dataclasses import dataclass, field
from typing import Protocol

from capture_narrator.domain.pipeline import Notification


class UiChannel(Protocol):
    """Interface for toast notifications and audio playback requests."""

    def notify(self, notification: Notification) -> None:
        """Show a toast-style notification."""

    def play_audio(self, audio_url: str) -> None:
        """Request playback of an audio data URI."""


@dataclass
class EventBuffer(UiChannel):
    """Collects UI events until the HTTP layer drains them into a response."""

    notifications: list[Notification] = field(default_factory=list)
    playback: list[str] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def play_audio(self, audio_url: str) -> None:
        self.playback.append(audio_url)

    def drain(self) -> tuple[list[Notification], list[str]]:
        """Return and clear pending events."""
        notifications, self.notifications = self.notifications, []
        playback, self.playback = self.playback, []
        return notifications, playback
