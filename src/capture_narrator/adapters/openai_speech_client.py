"""OpenAI audio API client for speech synthesis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from capture_narrator.services.speech import SpeechClient


@dataclass
class OpenAISpeechClient(SpeechClient):
    """Speech client backed by OpenAI's speech endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAISpeechClient":
        """Create an OpenAI speech client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def synthesize(self, *, model: str, voice_name: str, text: str) -> bytes:
        """Request WAV audio for the given text."""
        response = await self.client.audio.speech.create(
            model=model,
            voice=voice_name,
            input=text,
            response_format="wav",
        )
        return response.content
