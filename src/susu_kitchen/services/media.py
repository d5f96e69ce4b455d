"""Storage of captured and generated media as referencable URLs."""

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from susu_kitchen.domain.errors import MediaStorageError
from susu_kitchen.services.generation import detect_mime_type

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "video/mp4": "mp4",
}


class MediaRepository(Protocol):
    """Persistence interface for binary media."""

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``path`` and return a public reference."""


class MediaFetcher(Protocol):
    """Interface for reading media back from a reference."""

    async def fetch(self, url: str) -> bytes:
        """Download the bytes behind a URL."""


@dataclass
class MediaService:
    """Turns bytes into references and references back into bytes."""

    repository: MediaRepository
    fetcher: MediaFetcher

    def store(self, folder: str, data: bytes) -> str:
        """Upload media under a fresh name in ``folder``."""
        content_type = detect_mime_type(data)
        extension = _EXTENSIONS.get(content_type, "bin")
        path = f"{folder}/{uuid4().hex}.{extension}"
        try:
            return self.repository.upload(path, data, content_type)
        except Exception as exc:
            raise MediaStorageError("Could not save the media") from exc

    async def load(self, ref: str) -> bytes:
        """Resolve a reference (public URL or data URL) into bytes."""
        if ref.startswith("data:"):
            return decode_data_url(ref)
        return await self.fetcher.fetch(ref)


def decode_data_url(value: str) -> bytes:
    """Decode a base64 data URL, or a bare base64 string."""
    payload = value.partition(",")[2] if value.startswith("data:") else value
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Invalid base64 payload") from exc
