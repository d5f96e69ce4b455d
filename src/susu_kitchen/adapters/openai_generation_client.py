"""OpenAI-backed generation client."""

import base64
import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from susu_kitchen.domain.generation import VideoJob
from susu_kitchen.services.generation import GenerationClient, detect_mime_type

_AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
}
_IMAGE_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


@dataclass
class OpenAIGenerationClient(GenerationClient):
    """Generation client backed by the OpenAI API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIGenerationClient":
        """Create an OpenAI generation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def transcribe(self, *, model: str, audio: bytes, mime_type: str) -> str:
        """Transcribe a narration with the audio transcription endpoint."""
        base_type = mime_type.split(";", 1)[0].strip()
        extension = _AUDIO_EXTENSIONS.get(base_type, "webm")
        transcription = await self.client.audio.transcriptions.create(
            model=model,
            file=(f"narration.{extension}", audio, base_type),
        )
        return transcription.text

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call the Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "recipe_structure",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        """Generate an image and return its decoded bytes."""
        response = await self.client.images.generate(
            model=model, prompt=prompt, size="1024x1024", n=1
        )
        if not response.data or not response.data[0].b64_json:
            return b""
        return base64.b64decode(response.data[0].b64_json)

    async def submit_video(
        self, *, model: str, prompt: str, start_frame: bytes | None
    ) -> VideoJob:
        """Submit a video job, optionally anchored on a start frame."""
        request_payload: dict[str, object] = {
            "model": model,
            "prompt": prompt,
            "size": "1280x720",
        }
        if start_frame:
            mime_type = detect_mime_type(start_frame)
            extension = _IMAGE_EXTENSIONS.get(mime_type, "jpg")
            request_payload["input_reference"] = (
                f"start.{extension}",
                start_frame,
                mime_type,
            )
        video = await self.client.videos.create(**request_payload)
        return _to_job(video)

    async def get_video(self, job_id: str) -> VideoJob:
        """Retrieve the status of a video job."""
        return _to_job(await self.client.videos.retrieve(job_id))

    async def download_video(self, job_id: str) -> bytes:
        """Download the rendered MP4 of a completed job."""
        content = await self.client.videos.download_content(job_id, variant="video")
        return content.content

    async def answer(
        self, *, model: str, query: str, instructions: str, store: bool
    ) -> dict[str, object]:
        """Answer a question with the web search tool and collect URL citations."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=query,
            tools=[{"type": "web_search"}],
            store=store,
        )
        sources: list[dict[str, object]] = []
        for item in response.output:
            if getattr(item, "type", None) != "message":
                continue
            for part in getattr(item, "content", []) or []:
                for annotation in getattr(part, "annotations", []) or []:
                    if getattr(annotation, "type", None) == "url_citation":
                        sources.append(
                            {"title": annotation.title, "url": annotation.url}
                        )
        return {"text": response.output_text, "sources": sources}


def _to_job(video: object) -> VideoJob:
    status = getattr(video, "status", None)
    error = getattr(video, "error", None)
    return VideoJob(
        id=str(getattr(video, "id", "")),
        done=status in {"completed", "failed"},
        failed=status == "failed",
        error=getattr(error, "message", None) if error else None,
    )
