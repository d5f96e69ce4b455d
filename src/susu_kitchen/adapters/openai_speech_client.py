"""OpenAI text-to-speech client."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from susu_kitchen.services.cooking import SpeechClient


@dataclass
class OpenAISpeechClient(SpeechClient):
    """Speech client backed by the OpenAI audio speech endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAISpeechClient":
        """Create an OpenAI speech client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Render ``text`` as MP3 audio."""
        response = await self.client.audio.speech.create(
            model=self.model,
            voice=voice,
            input=text,
            response_format="mp3",
        )
        return response.content
