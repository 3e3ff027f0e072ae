"""Pydantic models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from capture_narrator.domain.history import format_time_ago
from capture_narrator.domain.models import FacingMode, Theme, UserPreferences, Voice
from capture_narrator.domain.pipeline import (
    STATUS_MESSAGES,
    Coordinates,
    Notification,
    PipelineStatus,
)
from capture_narrator.services.regeneration import HistoryItemView
from capture_narrator.services.registry import CaptureSessionHandle


class SignUpRequest(BaseModel):
    """Sign-up payload."""

    email: str
    password: str = Field(min_length=6)
    first_name: str = ""
    last_name: str = ""


class LoginRequest(BaseModel):
    """Sign-in payload."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Authenticated user and token."""

    user_id: UUID
    email: str | None
    photo_url: str | None
    access_token: str | None


class PreferencesPayload(BaseModel):
    """Stored preferences."""

    theme: Theme
    voice: Voice

    @classmethod
    def from_preferences(cls, preferences: UserPreferences) -> "PreferencesPayload":
        return cls(theme=preferences.theme, voice=preferences.voice)


class PreferencesUpdate(BaseModel):
    """Partial preferences update."""

    theme: Theme | None = None
    voice: Voice | None = None


class CoordinatesPayload(BaseModel):
    """Client-reported geolocation."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class LocationRequest(BaseModel):
    """Coordinates, or null when the client was denied geolocation."""

    coordinates: CoordinatesPayload | None = None

    def to_domain(self) -> Coordinates | None:
        return self.coordinates.to_domain() if self.coordinates else None


class CameraRequest(BaseModel):
    """Camera on/off toggle."""

    enabled: bool


class VoiceRequest(BaseModel):
    """Voice selection."""

    voice: Voice


class NotificationPayload(BaseModel):
    """Toast notification."""

    title: str
    description: str
    destructive: bool = False

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationPayload":
        return cls(
            title=notification.title,
            description=notification.description,
            destructive=notification.destructive,
        )


class CaptureSnapshot(BaseModel):
    """Capture session state plus UI events raised since the last response."""

    id: UUID
    accepted: bool = True
    status: PipelineStatus
    status_message: str
    camera_on: bool
    camera_permission_denied: bool
    facing_mode: FacingMode
    voice: Voice
    frame: str | None
    location: str | None
    description: str
    audio_url: str
    failed_step: PipelineStatus | None
    error_message: str | None
    can_capture: bool
    can_submit: bool
    notifications: list[NotificationPayload] = Field(default_factory=list)
    play_audio: list[str] = Field(default_factory=list)

    @classmethod
    def from_handle(
        cls, handle: CaptureSessionHandle, accepted: bool = True
    ) -> "CaptureSnapshot":
        pipeline = handle.pipeline
        state = pipeline.state
        notifications, playback = handle.events.drain()
        return cls(
            id=handle.id,
            accepted=accepted,
            status=state.status,
            status_message=STATUS_MESSAGES[state.status],
            camera_on=pipeline.media.is_on,
            camera_permission_denied=pipeline.media.permission_denied,
            facing_mode=pipeline.media.facing_mode,
            voice=pipeline.voice,
            frame=state.frame,
            location=state.location,
            description=state.description,
            audio_url=state.audio_url,
            failed_step=state.failed_step,
            error_message=state.error_message,
            can_capture=pipeline.can_capture,
            can_submit=pipeline.can_submit,
            notifications=[NotificationPayload.from_domain(n) for n in notifications],
            play_audio=playback,
        )


class HistoryItemPayload(BaseModel):
    """History entry with its display state."""

    id: UUID
    image_url: str
    description: str
    audio_url: str
    location: str
    timestamp: datetime | None
    time_ago: str
    voice_used: Voice
    current_voice: Voice
    is_regenerating: bool

    @classmethod
    def from_view(cls, view: HistoryItemView) -> "HistoryItemPayload":
        entry = view.entry
        return cls(
            id=entry.id,
            image_url=entry.image_url,
            description=entry.description,
            audio_url=view.current_audio_url,
            location=entry.location,
            timestamp=entry.timestamp,
            time_ago=format_time_ago(entry.timestamp),
            voice_used=entry.voice_used,
            current_voice=view.current_voice,
            is_regenerating=view.is_regenerating,
        )


class HistoryResponse(BaseModel):
    """A user's history, newest first."""

    entries: list[HistoryItemPayload]


class RegenerationResponse(BaseModel):
    """Outcome of a voice change on a history entry."""

    accepted: bool
    entry: HistoryItemPayload
    notifications: list[NotificationPayload] = Field(default_factory=list)
    play_audio: list[str] = Field(default_factory=list)
