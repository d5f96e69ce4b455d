"""Supabase Storage implementation for media."""

from dataclasses import dataclass

from supabase import Client

from susu_kitchen.services.media import MediaRepository


@dataclass
class SupabaseMediaRepository(MediaRepository):
    """Uploads media to a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return their public URL."""
        storage = self.client.storage.from_(self.bucket)
        storage.upload(
            path=path,
            file=data,
            file_options={"content-type": content_type, "upsert": "true"},
        )
        public_url = storage.get_public_url(path)
        if not public_url:
            raise RuntimeError(f"Failed to resolve public URL for {path}")
        return public_url.rstrip("?")
