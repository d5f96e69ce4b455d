"""Generation gateway: recipe structuring, images, thumbnails, video, answers."""

import asyncio
import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from susu_kitchen.domain.errors import GenerationError, StaleStateError
from susu_kitchen.domain.generation import (
    Citation,
    GroundedAnswer,
    RecipeStructure,
    VideoJob,
)

_logger = logging.getLogger(__name__)

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "servings": {"type": "number"},
        "prepTime": {"type": "string"},
        "difficulty": {"type": "string", "enum": ["Easy", "Medium", "Hard"]},
        "calories": {"type": "number"},
        "tags": {"type": "array", "items": {"type": "string"}},
        "tips": {"type": "string"},
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item": {"type": "string"},
                    "amount": {"type": "string"},
                    "estimatedCost": {"type": "number"},
                    "category": {"type": "string"},
                },
                "required": ["item", "amount", "estimatedCost", "category"],
                "additionalProperties": False,
            },
        },
        "instructions": {"type": "array", "items": {"type": "string"}},
    },
    "required": [
        "title",
        "description",
        "servings",
        "prepTime",
        "difficulty",
        "calories",
        "tags",
        "tips",
        "ingredients",
        "instructions",
    ],
    "additionalProperties": False,
}

_ANSWER_INSTRUCTIONS = (
    "You are Susu. Answer the user's question about cooking. {context}"
    "Search the web for accurate substitutions, wine pairings, or facts if "
    "needed. Keep it warm, motherly, and helpful."
)


class GenerationClient(Protocol):
    """Interface for the remote generative AI service."""

    async def transcribe(self, *, model: str, audio: bytes, mime_type: str) -> str:
        """Return the transcript of an audio payload."""

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
        """Return structured data matching ``schema``."""

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        """Return image bytes for a prompt."""

    async def submit_video(
        self, *, model: str, prompt: str, start_frame: bytes | None
    ) -> VideoJob:
        """Submit a video synthesis job."""

    async def get_video(self, job_id: str) -> VideoJob:
        """Return the current status of a video job."""

    async def download_video(self, job_id: str) -> bytes:
        """Return the rendered video of a completed job."""

    async def answer(
        self, *, model: str, query: str, instructions: str, store: bool
    ) -> dict[str, object]:
        """Return ``{"text": str, "sources": list[dict]}`` from a web-grounded answer."""


@dataclass
class GenerationGateway:
    """Applies prompts, validation and polling rules around a ``GenerationClient``."""

    client: GenerationClient
    transcription_model: str
    recipe_model: str
    image_model: str
    video_model: str
    answer_model: str
    reasoning_effort: str | None = None
    store: bool = False
    video_poll_interval_seconds: float = 5.0
    video_max_polls: int = 60
    thumbnail_stagger_seconds: float = 0.2

    async def transcribe_and_structure(
        self,
        audio: bytes,
        image: bytes | None = None,
        audio_mime_type: str = "audio/webm",
    ) -> RecipeStructure:
        """Turn a spoken narration and optional dish photo into a recipe."""
        try:
            transcript = await self.client.transcribe(
                model=self.transcription_model,
                audio=audio,
                mime_type=audio_mime_type,
            )
            if not transcript.strip():
                raise GenerationError("The narration could not be transcribed")
            raw = await self.client.extract(
                model=self.recipe_model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=_recipe_prompt(transcript, has_image=image is not None),
                schema=RECIPE_SCHEMA,
                image_data_url=to_data_url(image) if image else None,
            )
            return RecipeStructure.model_validate(raw)
        except GenerationError:
            raise
        except PydanticValidationError as exc:
            raise GenerationError("The generated recipe was incomplete") from exc
        except Exception as exc:
            raise GenerationError("Recipe generation failed") from exc

    async def synthesize_image(self, prompt_text: str) -> bytes:
        """Generate a single image, failing when nothing comes back."""
        try:
            image = await self.client.generate_image(
                model=self.image_model, prompt=prompt_text
            )
        except Exception as exc:
            raise GenerationError("Image generation failed") from exc
        if not image:
            raise GenerationError("No image generated")
        return image

    async def synthesize_hero_image(self, title: str, description: str) -> bytes:
        return await self.synthesize_image(hero_image_prompt(title, description))

    async def synthesize_thumbnails(self, step_texts: list[str]) -> list[bytes]:
        """Generate one thumbnail per step; failed steps yield ``b""``."""
        return list(
            await asyncio.gather(
                *(
                    self._thumbnail(index, text)
                    for index, text in enumerate(step_texts)
                )
            )
        )

    async def _thumbnail(self, index: int, step_text: str) -> bytes:
        await asyncio.sleep(index * self.thumbnail_stagger_seconds)
        try:
            return await self.client.generate_image(
                model=self.image_model, prompt=thumbnail_prompt(step_text)
            )
        except Exception as exc:
            _logger.warning("Thumbnail generation failed for step %s: %s", index, exc)
            return b""

    async def synthesize_video(
        self,
        prompt_text: str,
        start_frame: bytes | None = None,
        *,
        is_live: Callable[[], bool] | None = None,
    ) -> bytes:
        """Submit a video job and poll it until done, cancelled or out of attempts."""
        try:
            job = await self.client.submit_video(
                model=self.video_model, prompt=prompt_text, start_frame=start_frame
            )
        except Exception as exc:
            raise GenerationError("Video generation could not be started") from exc

        polls = 0
        while not job.done:
            if polls >= self.video_max_polls:
                raise GenerationError(
                    f"Video generation timed out after {polls} status checks"
                )
            await asyncio.sleep(self.video_poll_interval_seconds)
            if is_live is not None and not is_live():
                raise StaleStateError(f"Video job {job.id} is no longer needed")
            try:
                job = await self.client.get_video(job.id)
            except Exception as exc:
                raise GenerationError("Video status check failed") from exc
            polls += 1

        if job.failed:
            raise GenerationError(job.error or "Video generation failed")
        try:
            video = await self.client.download_video(job.id)
        except Exception as exc:
            raise GenerationError("Video generation failed") from exc
        if not video:
            raise GenerationError("Video generation returned no result")
        return video

    async def answer_grounded(
        self, query: str, context: str | None = None
    ) -> GroundedAnswer:
        """Answer a cooking question with web citations."""
        context_line = (
            f"Context: The user is currently looking at this recipe: {context}. "
            if context
            else ""
        )
        try:
            raw = await self.client.answer(
                model=self.answer_model,
                query=query,
                instructions=_ANSWER_INSTRUCTIONS.format(context=context_line),
                store=self.store,
            )
        except Exception as exc:
            raise GenerationError("Grounded answer failed") from exc
        text = raw.get("text")
        sources = raw.get("sources")
        return GroundedAnswer(
            text=text if isinstance(text, str) else "",
            sources=normalize_citations(sources if isinstance(sources, list) else []),
        )


def normalize_citations(raw_sources: list[object]) -> list[Citation]:
    """Map either ``{title, url}`` or ``{web: {title, uri}}`` into ``Citation``."""
    citations: list[Citation] = []
    for raw in raw_sources:
        if not isinstance(raw, dict):
            continue
        source = raw.get("web") if isinstance(raw.get("web"), dict) else raw
        link = source.get("url") or source.get("uri")
        if not isinstance(link, str) or not link:
            continue
        label = source.get("title")
        citations.append(
            Citation(label=label if isinstance(label, str) and label else link, link=link)
        )
    return citations


def hero_image_prompt(title: str, description: str) -> str:
    return (
        "A professional, cinematic, high-resolution food photography shot of "
        f"{title}. {description}. Dark moody lighting, rustic wooden table, 4k, "
        "michelin star presentation, highly detailed texture."
    )


def thumbnail_prompt(step_text: str) -> str:
    return (
        "Cinematic close-up food photography thumbnail representing this cooking "
        f'step: "{step_text}". Focus strictly on the action (e.g. chopping, '
        "stirring, boiling, baking). Warm, moody lighting, photorealistic, "
        "appetizing, highly detailed."
    )


def video_prompt(title: str, *, from_dish: bool) -> str:
    """Prompt for the recipe video, depending on which start frame is used."""
    if from_dish:
        return (
            f"Cinematic slow motion masterpiece shot of {title}. Golden hour "
            "lighting. The camera pans slowly over the dish, showcasing steam "
            "rising and delicious textures. 4k resolution, highly detailed, "
            "professional food commercial style."
        )
    return (
        "Cinematic transition starting with a warm, loving grandmother in a "
        f"kitchen, smoothly transforming into a close-up of a delicious {title}. "
        "Warm golden lighting, steam rising, high-end culinary documentary style. "
        "4k resolution."
    )


def _recipe_prompt(transcript: str, *, has_image: bool) -> str:
    image_hint = (
        "Also use the provided image of the dish/ingredients for visual context "
        "and accuracy. "
        if has_image
        else ""
    )
    return (
        "You are Susu, a warm and expert home cook. Read the transcript of a "
        f"spoken recipe description. {image_hint}"
        "Extract a structured recipe with: a title and appetizing description in "
        "Susu's voice; servings, prep time and difficulty (Easy/Medium/Hard); "
        "estimated calories per serving; ingredients with specific quantities, "
        "an estimated cost in USD and a category; step-by-step instructions; "
        "\"Susu's Secret\" tips; relevant tags.\n\n"
        f"Transcript:\n{transcript}"
    )


def to_data_url(data: bytes) -> str:
    """Convert bytes to a base64 data URL."""
    mime_type = detect_mime_type(data)
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(data: bytes) -> str:
    """Infer a basic MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:8] == b"ftyp":
        return "video/mp4"
    if data.startswith(b"\x1a\x45\xdf\xa3"):
        return "audio/webm"
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return "audio/wav"
    if data.startswith(b"ID3") or data[:2] == b"\xff\xfb":
        return "audio/mpeg"
    return "image/jpeg"
