"""OpenAI Responses API client for image descriptions."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from capture_narrator.services.description import DescriptionClient


@dataclass
class OpenAIDescriptionClient(DescriptionClient):
    """Description client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIDescriptionClient":
        """Create an OpenAI description client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def describe(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API with the prompt and image."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            store=store,
        )
        output_text = response.output_text
        if not output_text or not output_text.strip():
            raise RuntimeError("OpenAI returned an empty description")
        return output_text
