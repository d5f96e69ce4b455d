"""Recipe video rendering shared by drafts and saved recipes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from susu_kitchen.services.generation import GenerationGateway, video_prompt
from susu_kitchen.services.media import MediaService

_logger = logging.getLogger(__name__)


@dataclass
class VideoRenderer:
    """Chooses a start frame, renders the video and stores it."""

    gateway: GenerationGateway
    media: MediaService
    persona_image_url: str

    async def render(
        self,
        title: str,
        image_url: str | None,
        *,
        is_live: Callable[[], bool] | None = None,
    ) -> str:
        """Render a video for ``title`` and return its stored reference.

        The dish image is the preferred start frame; without one the video
        opens on the persona portrait instead.
        """
        start_frame = await self._load(image_url) if image_url else None
        from_dish = start_frame is not None
        if start_frame is None:
            start_frame = await self._load(self.persona_image_url)
        video = await self.gateway.synthesize_video(
            video_prompt(title, from_dish=from_dish),
            start_frame,
            is_live=is_live,
        )
        return self.media.store("videos", video)

    async def _load(self, ref: str) -> bytes | None:
        try:
            return await self.media.load(ref)
        except Exception as exc:
            _logger.warning("Could not load start frame %s: %s", ref[:80], exc)
            return None
