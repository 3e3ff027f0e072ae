"""Voice regeneration for persisted history entries."""

import logging
from dataclasses import dataclass, field, replace
from uuid import UUID

from capture_narrator.domain.history import HistoryEntry
from capture_narrator.domain.models import CurrentSession, Voice
from capture_narrator.domain.pipeline import Notification
from capture_narrator.services.history import HistoryService
from capture_narrator.services.notifications import UiChannel
from capture_narrator.services.preferences import PreferencesService
from capture_narrator.services.speech import SpeechService

logger = logging.getLogger(__name__)


@dataclass
class HistoryItemView:
    """Display state for one history entry."""

    entry: HistoryEntry
    current_voice: Voice
    current_audio_url: str
    is_regenerating: bool = False

    @classmethod
    def for_entry(cls, entry: HistoryEntry) -> "HistoryItemView":
        return cls(
            entry=entry,
            current_voice=entry.voice_used,
            current_audio_url=entry.audio_url,
        )


@dataclass
class VoiceRegenerationService:
    """Re-narrates stored entries in a different voice."""

    speech_service: SpeechService
    history_service: HistoryService
    preferences_service: PreferencesService
    # Only views with a regeneration in flight are kept.
    _in_flight: dict[UUID, HistoryItemView] = field(default_factory=dict, repr=False)

    def view_for(self, entry: HistoryEntry) -> HistoryItemView:
        """Return the in-flight view for an entry, or a fresh one."""
        view = self._in_flight.get(entry.id)
        if view is None:
            view = HistoryItemView.for_entry(entry)
        return view

    async def regenerate(
        self,
        session: CurrentSession,
        view: HistoryItemView,
        new_voice: Voice,
        ui: UiChannel,
    ) -> bool:
        """Synthesize the entry's description in ``new_voice`` and store it.

        Returns False without side effects when the voice is unchanged or a
        regeneration for the entry is already running. The store is written
        only after synthesis succeeds.
        """
        if new_voice == view.current_voice or view.is_regenerating:
            return False

        view.is_regenerating = True
        view.current_voice = new_voice
        self._in_flight[view.entry.id] = view
        try:
            speech = await self.speech_service.synthesize(
                view.entry.description, new_voice
            )
            self.history_service.update_audio(view.entry.id, speech.audio_url, new_voice)
        except Exception as exc:
            logger.exception(
                "Voice regeneration failed", extra={"entry_id": str(view.entry.id)}
            )
            view.current_voice = view.entry.voice_used
            ui.notify(
                Notification(
                    title="Failed to regenerate audio",
                    description=str(exc),
                    destructive=True,
                )
            )
            return False
        finally:
            view.is_regenerating = False
            self._in_flight.pop(view.entry.id, None)

        view.entry = replace(
            view.entry, audio_url=speech.audio_url, voice_used=new_voice
        )
        view.current_audio_url = speech.audio_url
        self._remember_voice(session, new_voice)
        ui.notify(
            Notification(
                title="Audio regenerated!",
                description=f"Switched to {new_voice.value} voice.",
            )
        )
        ui.play_audio(speech.audio_url)
        return True

    def _remember_voice(self, session: CurrentSession, voice: Voice) -> None:
        try:
            self.preferences_service.update(session, voice=voice)
        except Exception:
            logger.exception(
                "Failed to save voice preference",
                extra={"user_id": str(session.user.id)},
            )
