"""Image description service using LLMs."""

from dataclasses import dataclass
from typing import Protocol

from capture_narrator.domain.media import DescriptionResult, parse_data_url

DESCRIPTION_PROMPT = (
    "Describe this photo for someone who cannot see it. "
    "Mention the main subjects, the setting, and any visible text or hazards. "
    "Use two to four plain sentences suitable for being read aloud."
)


class DescriptionClient(Protocol):
    """Interface for LLM image description."""

    async def describe(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Return a natural-language description of the image."""


@dataclass
class DescriptionService:
    """Service that prepares description prompts and validates results."""

    client: DescriptionClient
    model: str
    store: bool

    async def describe(self, photo_data_uri: str) -> DescriptionResult:
        """Describe an image given as a data URI."""
        mime_type, _ = parse_data_url(photo_data_uri)
        if not mime_type.startswith("image/"):
            raise ValueError(f"Expected an image data URI, got {mime_type!r}")
        text = await self.client.describe(
            model=self.model,
            store=self.store,
            image_data_url=photo_data_uri,
            prompt=DESCRIPTION_PROMPT,
        )
        return DescriptionResult(description=text.strip())
