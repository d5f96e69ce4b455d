"""Shared test fixtures."""

import asyncio
import copy
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from susu_kitchen.config import Settings
from susu_kitchen.containers import AppContainer, build_gateway
from susu_kitchen.domain.generation import VideoJob
from susu_kitchen.services.assistant import AssistantService
from susu_kitchen.services.catalog import CatalogService
from susu_kitchen.services.cooking import CookingService, SpeechClient
from susu_kitchen.services.drafts import DraftOrchestrator
from susu_kitchen.services.enrichment import EnrichmentOrchestrator
from susu_kitchen.services.generation import GenerationClient, GenerationGateway
from susu_kitchen.services.media import MediaFetcher, MediaRepository, MediaService
from susu_kitchen.services.profiles import ProfileCoordinator
from susu_kitchen.services.store import KitchenStore, StateRepository
from susu_kitchen.services.videos import VideoRenderer

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video"
PERSONA_URL = "https://cdn.test/persona.jpg"


def recipe_payload(**overrides: object) -> dict[str, object]:
    """Structured recipe as the extraction model returns it."""
    payload: dict[str, object] = {
        "title": "Roasted Garlic Soup",
        "description": "A silky soup that warms you from the inside.",
        "servings": 4,
        "prepTime": "45 mins",
        "difficulty": "Easy",
        "calories": 210.4,
        "tags": ["Soup", "Vegetarian"],
        "tips": "Roast the garlic until it is jammy.",
        "ingredients": [
            {
                "item": "Garlic",
                "amount": "2 heads",
                "estimatedCost": 1.2,
                "category": "Produce",
            },
            {
                "item": "Vegetable Stock",
                "amount": "1 litre",
                "estimatedCost": 3.0,
                "category": "Pantry",
            },
        ],
        "instructions": [
            "Roast the garlic in the oven for 40 minutes.",
            "Simmer the stock with the garlic.",
            "Blend until smooth and serve.",
        ],
    }
    payload.update(overrides)
    return payload


@dataclass
class InMemoryStateRepository(StateRepository):
    """In-memory state repository for tests."""

    documents: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    saved_keys: list[str] = field(default_factory=list)
    fail_saves: bool = False

    def load(self, key: str) -> list[dict[str, object]] | None:
        document = self.documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def save(self, key: str, value: list[dict[str, object]]) -> None:
        if self.fail_saves:
            raise RuntimeError("storage unavailable")
        self.documents[key] = copy.deepcopy(value)
        self.saved_keys.append(key)


@dataclass
class InMemoryMediaRepository(MediaRepository):
    """In-memory media repository returning ``memory://`` references."""

    objects: dict[str, bytes] = field(default_factory=dict)
    fail_uploads: bool = False

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        if self.fail_uploads:
            raise RuntimeError("bucket unavailable")
        self.objects[path] = data
        return f"memory://{path}"

    def paths(self, folder: str) -> list[str]:
        return [path for path in self.objects if path.startswith(f"{folder}/")]


@dataclass
class FakeMediaFetcher(MediaFetcher):
    """Resolves ``memory://`` references and a fixed set of remote URLs."""

    repository: InMemoryMediaRepository
    remote: dict[str, bytes] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url.startswith("memory://"):
            return self.repository.objects[url.removeprefix("memory://")]
        if url in self.remote:
            return self.remote[url]
        raise RuntimeError(f"unreachable: {url}")


@dataclass
class FakeGenerationClient(GenerationClient):
    """Fake generation client with scripted results."""

    transcript: str = "First you roast two heads of garlic..."
    structure: dict[str, object] = field(default_factory=recipe_payload)
    image: bytes = PNG_BYTES
    failing_prompts: tuple[str, ...] = ()
    image_gate: asyncio.Event | None = None
    pending_polls: int = 0
    video_status: str = "completed"
    video: bytes = MP4_BYTES
    on_poll: Callable[[], None] | None = None
    answer_payload: dict[str, object] = field(
        default_factory=lambda: {
            "text": "Use Greek yogurt instead of sour cream.",
            "sources": [
                {"title": "Kitchn", "url": "https://kitchn.test/swap"},
                {"web": {"title": "Serious Eats", "uri": "https://se.test/yogurt"}},
            ],
        }
    )
    fail_extract: bool = False
    fail_answer: bool = False
    extract_calls: list[dict[str, object]] = field(default_factory=list)
    image_prompts: list[str] = field(default_factory=list)
    video_requests: list[dict[str, object]] = field(default_factory=list)
    answer_calls: list[dict[str, object]] = field(default_factory=list)
    polls: int = 0

    async def transcribe(self, *, model: str, audio: bytes, mime_type: str) -> str:
        return self.transcript

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
        self.extract_calls.append({"prompt": prompt, "image_data_url": image_data_url})
        if self.fail_extract:
            raise RuntimeError("model overloaded")
        return self.structure

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        self.image_prompts.append(prompt)
        if self.image_gate is not None:
            await self.image_gate.wait()
        if any(marker in prompt for marker in self.failing_prompts):
            raise RuntimeError("image quota exceeded")
        return self.image

    async def submit_video(
        self, *, model: str, prompt: str, start_frame: bytes | None
    ) -> VideoJob:
        self.video_requests.append({"prompt": prompt, "start_frame": start_frame})
        return self._job()

    async def get_video(self, job_id: str) -> VideoJob:
        self.polls += 1
        if self.on_poll is not None:
            self.on_poll()
        return self._job()

    async def download_video(self, job_id: str) -> bytes:
        return self.video

    async def answer(
        self, *, model: str, query: str, instructions: str, store: bool
    ) -> dict[str, object]:
        self.answer_calls.append({"query": query, "instructions": instructions})
        if self.fail_answer:
            raise RuntimeError("network down")
        return self.answer_payload

    def _job(self) -> VideoJob:
        done = self.polls >= self.pending_polls
        return VideoJob(
            id="video-1",
            done=done,
            failed=done and self.video_status == "failed",
            error="blocked by moderation" if self.video_status == "failed" else None,
        )


@dataclass
class FakeSpeechClient(SpeechClient):
    """Fake speech client that records requested voices."""

    failing_voices: set[str] = field(default_factory=set)
    voices: list[str] = field(default_factory=list)

    async def synthesize(self, text: str, voice: str) -> bytes:
        self.voices.append(voice)
        if voice in self.failing_voices:
            raise RuntimeError(f"voice {voice} unavailable")
        return f"mp3:{voice}:{text}".encode()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        persona_image_url=PERSONA_URL,
        video_poll_interval_seconds=0.0,
        video_max_polls=5,
        thumbnail_stagger_seconds=0.0,
        environment="test",
    )


@pytest.fixture
def state_repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def store(state_repository: InMemoryStateRepository) -> KitchenStore:
    return KitchenStore.load(state_repository)


@pytest.fixture
def media_repository() -> InMemoryMediaRepository:
    return InMemoryMediaRepository()


@pytest.fixture
def media_fetcher(media_repository: InMemoryMediaRepository) -> FakeMediaFetcher:
    return FakeMediaFetcher(repository=media_repository, remote={PERSONA_URL: PNG_BYTES})


@pytest.fixture
def media(
    media_repository: InMemoryMediaRepository, media_fetcher: FakeMediaFetcher
) -> MediaService:
    return MediaService(repository=media_repository, fetcher=media_fetcher)


@pytest.fixture
def generation_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def gateway(
    settings: Settings, generation_client: FakeGenerationClient
) -> GenerationGateway:
    return build_gateway(settings, generation_client)


@pytest.fixture
def coordinator(store: KitchenStore) -> ProfileCoordinator:
    return ProfileCoordinator.start(store)


@pytest.fixture
def videos(
    settings: Settings, gateway: GenerationGateway, media: MediaService
) -> VideoRenderer:
    return VideoRenderer(
        gateway=gateway, media=media, persona_image_url=settings.persona_image_url
    )


@pytest.fixture
def drafts(
    coordinator: ProfileCoordinator,
    gateway: GenerationGateway,
    media: MediaService,
    videos: VideoRenderer,
) -> DraftOrchestrator:
    return DraftOrchestrator(
        coordinator=coordinator, gateway=gateway, media=media, videos=videos
    )


@pytest.fixture
def enrichment(
    coordinator: ProfileCoordinator,
    gateway: GenerationGateway,
    media: MediaService,
    videos: VideoRenderer,
) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(
        coordinator=coordinator, gateway=gateway, media=media, videos=videos
    )


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def cooking(
    coordinator: ProfileCoordinator, speech_client: FakeSpeechClient
) -> CookingService:
    return CookingService(coordinator=coordinator, speech_client=speech_client, voice="sage")


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    store: KitchenStore,
    media: MediaService,
    gateway: GenerationGateway,
    coordinator: ProfileCoordinator,
    drafts: DraftOrchestrator,
    enrichment: EnrichmentOrchestrator,
    cooking: CookingService,
) -> AppContainer:
    async def close_resources() -> None:
        await drafts.drain()

    return AppContainer(
        settings=settings,
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
