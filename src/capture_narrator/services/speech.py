"""Text-to-speech service."""

from dataclasses import dataclass
from typing import Protocol

from capture_narrator.domain.media import SpeechResult, to_data_url
from capture_narrator.domain.models import Voice

AUDIO_MIME_TYPE = "audio/wav"


class SpeechClient(Protocol):
    """Interface for speech synthesis."""

    async def synthesize(self, *, model: str, voice_name: str, text: str) -> bytes:
        """Return WAV audio bytes for the text."""


@dataclass
class SpeechService:
    """Service that maps voice selectors and wraps audio as data URIs."""

    client: SpeechClient
    model: str
    voice_names: dict[Voice, str]

    async def synthesize(self, text: str, voice: Voice) -> SpeechResult:
        """Synthesize narration audio for the text in the chosen voice."""
        if not text.strip():
            raise ValueError("Cannot synthesize empty text")
        audio = await self.client.synthesize(
            model=self.model,
            voice_name=self.voice_names[voice],
            text=text,
        )
        if not audio:
            raise RuntimeError("Speech synthesis returned no audio")
        return SpeechResult(audio_url=to_data_url(audio, AUDIO_MIME_TYPE))
