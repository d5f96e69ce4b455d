"""Tests for HTTP-based adapters."""

import asyncio
import base64
import json
from types import SimpleNamespace

import httpx
import pytest

from susu_kitchen.adapters.media_fetcher import HttpxMediaFetcher
from susu_kitchen.adapters.openai_generation_client import OpenAIGenerationClient
from susu_kitchen.adapters.openai_speech_client import OpenAISpeechClient
from tests.conftest import PNG_BYTES


class _FakeResponses:
    def __init__(self, response: object) -> None:
        self.response = response
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return self.response


class _FakeTranscriptions:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return SimpleNamespace(text="roast the garlic")


class _FakeSpeech:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return SimpleNamespace(content=b"mp3-bytes")


class _FakeImages:
    def __init__(self, b64_json: str | None) -> None:
        self.b64_json = b64_json

    async def generate(self, **kwargs):  # type: ignore[no-untyped-def]
        return SimpleNamespace(data=[SimpleNamespace(b64_json=self.b64_json)])


class _FakeVideos:
    def __init__(self) -> None:
        self.created: dict[str, object] | None = None
        self.statuses = ["in_progress", "completed"]

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.created = kwargs
        return SimpleNamespace(id="video_1", status="queued", error=None)

    async def retrieve(self, video_id: str):  # type: ignore[no-untyped-def]
        return SimpleNamespace(id=video_id, status=self.statuses.pop(0), error=None)

    async def download_content(self, video_id: str, variant: str):  # type: ignore[no-untyped-def]
        assert variant == "video"
        return SimpleNamespace(content=b"mp4-bytes")


class _FakeOpenAI:
    def __init__(self, response: object = None, b64_json: str | None = None) -> None:
        self.responses = _FakeResponses(response)
        self.audio = SimpleNamespace(
            transcriptions=_FakeTranscriptions(), speech=_FakeSpeech()
        )
        self.images = _FakeImages(b64_json)
        self.videos = _FakeVideos()


def test_openai_extract_parses_structured_output() -> None:
    fake = _FakeOpenAI(SimpleNamespace(output_text=json.dumps({"title": "Soup"})))
    client = OpenAIGenerationClient(client=fake)

    result = asyncio.run(
        client.extract(
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
            prompt="Extract a recipe",
            schema={"type": "object"},
            image_data_url="data:image/png;base64,ZmFrZQ==",
        )
    )

    assert result == {"title": "Soup"}
    payload = fake.responses.last_payload
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["text"]["format"]["type"] == "json_schema"
    assert payload["input"][0]["content"][1]["type"] == "input_image"


def test_openai_extract_rejects_empty_output() -> None:
    client = OpenAIGenerationClient(client=_FakeOpenAI(SimpleNamespace(output_text="")))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.extract(
                model="gpt-5.2",
                reasoning_effort=None,
                store=False,
                prompt="Extract",
                schema={},
            )
        )


def test_openai_transcribe_names_file_from_mime_type() -> None:
    fake = _FakeOpenAI()
    client = OpenAIGenerationClient(client=fake)

    text = asyncio.run(
        client.transcribe(
            model="gpt-4o-transcribe", audio=b"ogg", mime_type="audio/ogg;codecs=opus"
        )
    )

    assert text == "roast the garlic"
    assert fake.audio.transcriptions.last_payload["file"] == (
        "narration.ogg",
        b"ogg",
        "audio/ogg",
    )


def test_openai_generate_image_decodes_payload() -> None:
    encoded = base64.b64encode(PNG_BYTES).decode()
    client = OpenAIGenerationClient(client=_FakeOpenAI(b64_json=encoded))

    image = asyncio.run(client.generate_image(model="gpt-image-1", prompt="Soup"))

    assert image == PNG_BYTES


def test_openai_generate_image_without_data() -> None:
    client = OpenAIGenerationClient(client=_FakeOpenAI(b64_json=None))

    assert asyncio.run(client.generate_image(model="gpt-image-1", prompt="x")) == b""


def test_openai_video_lifecycle() -> None:
    fake = _FakeOpenAI()
    client = OpenAIGenerationClient(client=fake)

    async def scenario() -> tuple[list[bool], bytes]:
        job = await client.submit_video(
            model="sora-2", prompt="Soup", start_frame=PNG_BYTES
        )
        states = [job.done]
        while not job.done:
            job = await client.get_video(job.id)
            states.append(job.done)
        return states, await client.download_video(job.id)

    states, video = asyncio.run(scenario())

    assert states == [False, False, True]
    assert video == b"mp4-bytes"
    assert fake.videos.created["input_reference"] == (
        "start.png",
        PNG_BYTES,
        "image/png",
    )


def test_openai_answer_collects_url_citations() -> None:
    annotation = SimpleNamespace(
        type="url_citation", title="Kitchn", url="https://kitchn.test/swap"
    )
    response = SimpleNamespace(
        output_text="Use yogurt.",
        output=[
            SimpleNamespace(type="web_search_call"),
            SimpleNamespace(
                type="message",
                content=[SimpleNamespace(annotations=[annotation])],
            ),
        ],
    )
    fake = _FakeOpenAI(response)
    client = OpenAIGenerationClient(client=fake)

    result = asyncio.run(
        client.answer(
            model="gpt-5.2", query="Swap?", instructions="Be warm", store=False
        )
    )

    assert result == {
        "text": "Use yogurt.",
        "sources": [{"title": "Kitchn", "url": "https://kitchn.test/swap"}],
    }
    assert fake.responses.last_payload["tools"] == [{"type": "web_search"}]


def test_openai_speech_client() -> None:
    fake = _FakeOpenAI()
    client = OpenAISpeechClient(client=fake, model="gpt-4o-mini-tts")

    audio = asyncio.run(client.synthesize("Stir well", "sage"))

    assert audio == b"mp3-bytes"
    assert fake.audio.speech.last_payload["voice"] == "sage"
    assert fake.audio.speech.last_payload["input"] == "Stir well"


def test_media_fetcher_downloads_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/media/dish.jpg"
        return httpx.Response(200, content=b"image-bytes")

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    fetcher = HttpxMediaFetcher(http_client=async_client)

    data = asyncio.run(fetcher.fetch("https://cdn.test/media/dish.jpg"))

    assert data == b"image-bytes"


def test_media_fetcher_raises_on_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    fetcher = HttpxMediaFetcher(http_client=httpx.AsyncClient(transport=transport))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(fetcher.fetch("https://cdn.test/missing.jpg"))
