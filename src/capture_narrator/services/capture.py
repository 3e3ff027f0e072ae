"""Capture-to-persistence pipeline.

Drives one client session from a live camera frame to a stored, narrated
history entry::

    idle -> generatingDescription -> generatingAudio -> saving -> success

``capturing`` and ``locating`` are short pulses that start and end in
``idle``. Any failure during submission lands in ``error`` with the failing
step recorded; ``reset`` returns to ``idle`` from ``idle``, ``success`` or
``error``.

The status field doubles as the re-entrancy guard: ``submit`` moves out of
the submittable statuses before its first ``await``, so a second call on the
same event loop sees a busy pipeline and returns without doing anything.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from capture_narrator.domain.history import NewHistoryEntry
from capture_narrator.domain.models import CurrentSession, FacingMode, Voice
from capture_narrator.domain.pipeline import (
    STATUS_MESSAGES,
    CaptureState,
    Coordinates,
    Notification,
    PipelineStatus,
)
from capture_narrator.services.description import DescriptionService
from capture_narrator.services.history import HistoryService
from capture_narrator.services.location import (
    LOCATION_NOT_AVAILABLE,
    LOCATION_UNAVAILABLE,
    LocationResolver,
)
from capture_narrator.services.media import MediaAcquisition
from capture_narrator.services.notifications import UiChannel
from capture_narrator.services.preferences import PreferencesService
from capture_narrator.services.speech import SpeechService

logger = logging.getLogger(__name__)

StatusListener = Callable[[PipelineStatus], None]


@dataclass
class CapturePipeline:
    """State machine for a single capture session."""

    session: CurrentSession
    media: MediaAcquisition
    location_resolver: LocationResolver
    description_service: DescriptionService
    speech_service: SpeechService
    history_service: HistoryService
    preferences_service: PreferencesService
    ui: UiChannel
    state: CaptureState = field(default_factory=CaptureState)
    _listeners: list[StatusListener] = field(default_factory=list, repr=False)

    @property
    def status(self) -> PipelineStatus:
        return self.state.status

    @property
    def voice(self) -> Voice:
        """The narration voice, read live from the session's preferences."""
        return self.session.preferences.voice

    @property
    def can_capture(self) -> bool:
        return (
            self.media.is_on
            and self.state.status is PipelineStatus.IDLE
            and self.state.frame is None
        )

    @property
    def can_submit(self) -> bool:
        return self.state.frame is not None and not self.state.is_busy

    def subscribe(self, listener: StatusListener) -> None:
        """Register a callback invoked on every status transition."""
        self._listeners.append(listener)

    async def mount(self, coordinates: Coordinates | None) -> None:
        """Acquire the camera and resolve the starting location."""
        if not self.media.start():
            self.ui.notify(
                Notification(
                    title="Camera Access Denied",
                    description=(
                        "Please enable camera permissions in your browser settings."
                    ),
                    destructive=True,
                )
            )
        await self.locate(coordinates)

    def teardown(self) -> None:
        """Release the camera; the session is unusable afterwards."""
        self.media.stop()

    def set_camera(self, enabled: bool) -> bool:
        """Turn the camera on or off; refused while permission is denied."""
        if not enabled:
            self.media.stop()
            return True
        if self.media.permission_denied:
            return False
        return self.media.start()

    def toggle_facing(self) -> FacingMode:
        return self.media.toggle_facing()

    def capture(self) -> bool:
        """Grab a still frame from the live stream."""
        if not self.can_capture:
            return False
        self._transition(PipelineStatus.CAPTURING)
        frame = self.media.capture_frame()
        if frame is not None:
            self.state.frame = frame
        self._transition(PipelineStatus.IDLE)
        return frame is not None

    async def locate(self, coordinates: Coordinates | None) -> bool:
        """Resolve the session location; failures store a fallback string."""
        if self.state.status is not PipelineStatus.IDLE:
            return False
        self._transition(PipelineStatus.LOCATING)
        try:
            if coordinates is None:
                self.state.location = LOCATION_UNAVAILABLE
                self.ui.notify(
                    Notification(
                        title="Location Error",
                        description=(
                            "Could not access your location. "
                            "Please ensure location services are enabled."
                        ),
                        destructive=True,
                    )
                )
            else:
                self.state.location = await self.location_resolver.resolve(
                    coordinates.latitude, coordinates.longitude
                )
        finally:
            self._transition(PipelineStatus.IDLE)
        return True

    def select_voice(self, voice: Voice) -> None:
        """Change the narration voice and remember it as the user's preference."""
        try:
            self.preferences_service.update(self.session, voice=voice)
        except Exception:
            logger.exception(
                "Failed to save voice preference",
                extra={"user_id": str(self.session.user.id)},
            )
            self.session.preferences = replace(self.session.preferences, voice=voice)
            self.ui.notify(
                Notification(
                    title="Preference not saved",
                    description="Your voice choice applies to this session only.",
                    destructive=True,
                )
            )

    async def submit(self) -> bool:
        """Run description, synthesis and persistence; False when refused."""
        if not self.can_submit:
            return False
        frame = self.state.frame
        voice = self.voice
        user_id = self.session.user.id
        self.state.clear_results()
        self._transition(PipelineStatus.GENERATING_DESCRIPTION)
        try:
            described = await self.description_service.describe(frame)
            self.state.description = described.description

            self._transition(PipelineStatus.GENERATING_AUDIO)
            speech = await self.speech_service.synthesize(described.description, voice)
            self.state.audio_url = speech.audio_url

            self._transition(PipelineStatus.SAVING)
            self.history_service.add_entry(
                user_id,
                NewHistoryEntry(
                    image_url=frame,
                    description=described.description,
                    audio_url=speech.audio_url,
                    location=self.state.location or LOCATION_NOT_AVAILABLE,
                    voice_used=voice,
                ),
            )
        except Exception as exc:
            self._fail(exc)
            return True

        self._transition(PipelineStatus.SUCCESS)
        self.ui.notify(
            Notification(title="Success!", description="Your audio description is ready.")
        )
        self.ui.play_audio(self.state.audio_url)
        return True

    def reset(self) -> bool:
        """Discard the frame and results; persisted entries are untouched."""
        if self.state.is_busy:
            return False
        self.state.frame = None
        self.state.clear_results()
        self._transition(PipelineStatus.IDLE)
        return True

    def _fail(self, exc: Exception) -> None:
        step = self.state.status
        logger.exception(
            "Capture pipeline step failed",
            extra={"step": step.value, "user_id": str(self.session.user.id)},
        )
        self.state.failed_step = step
        self.state.error_message = (
            str(exc) or f"An error occurred during: {STATUS_MESSAGES[step]}"
        )
        self._transition(PipelineStatus.ERROR)
        self.ui.notify(
            Notification(
                title="An error occurred",
                description=self.state.error_message,
                destructive=True,
            )
        )

    def _transition(self, status: PipelineStatus) -> None:
        self.state.status = status
        for listener in self._listeners:
            listener(status)
