"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PERSONA_IMAGE_URL = (
    "https://images.unsplash.com/photo-1556910103-1c02745a30bf"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=2000&q=80"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    supabase_url: str
    supabase_service_key: str
    media_bucket: str = "kitchen-media"
    transcription_model: str = "gpt-4o-transcribe"
    recipe_model: str = "gpt-5.2"
    recipe_reasoning_effort: str | None = "low"
    image_model: str = "gpt-image-1"
    video_model: str = "sora-2"
    answer_model: str = "gpt-5.2"
    speech_model: str = "gpt-4o-mini-tts"
    speech_voice: str = "sage"
    openai_store: bool = False
    persona_image_url: str = PERSONA_IMAGE_URL
    video_poll_interval_seconds: float = 5.0
    video_max_polls: int = 60
    thumbnail_stagger_seconds: float = 0.2
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
