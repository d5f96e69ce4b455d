"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from susu_kitchen.adapters.media_fetcher import HttpxMediaFetcher
from susu_kitchen.adapters.openai_generation_client import OpenAIGenerationClient
from susu_kitchen.adapters.openai_speech_client import OpenAISpeechClient
from susu_kitchen.adapters.supabase_media_repository import SupabaseMediaRepository
from susu_kitchen.adapters.supabase_state_repository import SupabaseStateRepository
from susu_kitchen.config import Settings
from susu_kitchen.services.assistant import AssistantService
from susu_kitchen.services.catalog import CatalogService
from susu_kitchen.services.cooking import CookingService
from susu_kitchen.services.drafts import DraftOrchestrator
from susu_kitchen.services.enrichment import EnrichmentOrchestrator
from susu_kitchen.services.generation import GenerationClient, GenerationGateway
from susu_kitchen.services.media import MediaService
from susu_kitchen.services.profiles import ProfileCoordinator
from susu_kitchen.services.store import KitchenStore
from susu_kitchen.services.videos import VideoRenderer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KitchenStore
    media: MediaService
    gateway: GenerationGateway
    coordinator: ProfileCoordinator
    catalog: CatalogService
    drafts: DraftOrchestrator
    enrichment: EnrichmentOrchestrator
    assistant: AssistantService
    cooking: CookingService
    close_resources: Callable[[], Awaitable[None]]


def build_gateway(
    settings: Settings, client: GenerationClient
) -> GenerationGateway:
    """Configure the generation gateway from settings."""
    return GenerationGateway(
        client=client,
        transcription_model=settings.transcription_model,
        recipe_model=settings.recipe_model,
        image_model=settings.image_model,
        video_model=settings.video_model,
        answer_model=settings.answer_model,
        reasoning_effort=settings.recipe_reasoning_effort,
        store=settings.openai_store,
        video_poll_interval_seconds=settings.video_poll_interval_seconds,
        video_max_polls=settings.video_max_polls,
        thumbnail_stagger_seconds=settings.thumbnail_stagger_seconds,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    store = KitchenStore.load(SupabaseStateRepository(supabase_client))
    fetcher = HttpxMediaFetcher.create()
    media = MediaService(
        repository=SupabaseMediaRepository(
            supabase_client, bucket=resolved_settings.media_bucket
        ),
        fetcher=fetcher,
    )
    generation_client = OpenAIGenerationClient.create(resolved_settings.openai_api_key)
    gateway = build_gateway(resolved_settings, generation_client)
    videos = VideoRenderer(
        gateway=gateway,
        media=media,
        persona_image_url=resolved_settings.persona_image_url,
    )
    coordinator = ProfileCoordinator.start(store)
    drafts = DraftOrchestrator(
        coordinator=coordinator, gateway=gateway, media=media, videos=videos
    )
    enrichment = EnrichmentOrchestrator(
        coordinator=coordinator, gateway=gateway, media=media, videos=videos
    )
    speech_client = OpenAISpeechClient.create(
        resolved_settings.openai_api_key, model=resolved_settings.speech_model
    )
    cooking = CookingService(
        coordinator=coordinator,
        speech_client=speech_client,
        voice=resolved_settings.speech_voice,
    )

    async def close_resources() -> None:
        await drafts.drain()
        await fetcher.close()
        await generation_client.client.close()
        await speech_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        media=media,
        gateway=gateway,
        coordinator=coordinator,
        catalog=CatalogService(store),
        drafts=drafts,
        enrichment=enrichment,
        assistant=AssistantService(gateway),
        cooking=cooking,
        close_resources=close_resources,
    )
