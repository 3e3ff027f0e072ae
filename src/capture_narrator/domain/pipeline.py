"""Capture pipeline statuses and session state."""

from dataclasses import dataclass
from enum import StrEnum


class PipelineStatus(StrEnum):
    """Closed set of capture pipeline statuses."""

    IDLE = "idle"
    CAPTURING = "capturing"
    LOCATING = "locating"
    GENERATING_DESCRIPTION = "generatingDescription"
    GENERATING_AUDIO = "generatingAudio"
    SAVING = "saving"
    SUCCESS = "success"
    ERROR = "error"


STATUS_MESSAGES: dict[PipelineStatus, str] = {
    PipelineStatus.IDLE: "",
    PipelineStatus.CAPTURING: "Capturing photo...",
    PipelineStatus.LOCATING: "Getting location...",
    PipelineStatus.GENERATING_DESCRIPTION: "Generating description...",
    PipelineStatus.GENERATING_AUDIO: "Generating audio...",
    PipelineStatus.SAVING: "Saving result...",
    PipelineStatus.SUCCESS: "Done!",
    PipelineStatus.ERROR: "An error occurred.",
}

# Statuses from which a new submit sequence may begin.
SUBMITTABLE_STATUSES = frozenset(
    {PipelineStatus.IDLE, PipelineStatus.SUCCESS, PipelineStatus.ERROR}
)


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair reported by the client."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Notification:
    """Toast-style message for the user."""

    title: str
    description: str
    destructive: bool = False


@dataclass
class CaptureState:
    """Ephemeral per-session pipeline state."""

    status: PipelineStatus = PipelineStatus.IDLE
    frame: str | None = None
    location: str | None = None
    description: str = ""
    audio_url: str = ""
    failed_step: PipelineStatus | None = None
    error_message: str | None = None

    @property
    def is_busy(self) -> bool:
        """Return True while any non-terminal, non-idle status is active."""
        return self.status not in SUBMITTABLE_STATUSES

    def clear_results(self) -> None:
        self.description = ""
        self.audio_url = ""
        self.failed_step = None
        self.error_message = None
