"""Video and step visuals for saved recipes."""

import logging
from dataclasses import dataclass

from susu_kitchen.domain.errors import MediaStorageError, NotFoundError
from susu_kitchen.domain.models import Recipe
from susu_kitchen.services.generation import GenerationGateway
from susu_kitchen.services.media import MediaService
from susu_kitchen.services.profiles import ProfileCoordinator
from susu_kitchen.services.videos import VideoRenderer

_logger = logging.getLogger(__name__)


@dataclass
class EnrichmentOrchestrator:
    """Attaches generated media to stored recipes.

    Finished media always lands on the stored recipe. The displayed copy is
    refreshed too when it is the same recipe. Only video polling is tied to
    the view: it stops once the recipe is no longer shown.
    """

    coordinator: ProfileCoordinator
    gateway: GenerationGateway
    media: MediaService
    videos: VideoRenderer

    async def generate_video_for(self, recipe_id: str) -> Recipe:
        """Render and attach a video to a saved recipe."""
        recipe = self._get(recipe_id)
        video_url = await self.videos.render(
            recipe.title,
            recipe.image_url,
            is_live=lambda: self.coordinator.is_showing(recipe_id),
        )
        return self._attach(recipe_id, {"video_url": video_url})

    async def visualize_steps(self, recipe_id: str) -> Recipe:
        """Generate one thumbnail per instruction and attach the aligned list."""
        recipe = self._get(recipe_id)
        images = await self.gateway.synthesize_thumbnails(recipe.instructions)
        thumbnails = [
            self._store_thumbnail(index, image) for index, image in enumerate(images)
        ]
        return self._attach(recipe_id, {"instruction_thumbnails": thumbnails})

    def _store_thumbnail(self, index: int, image: bytes) -> str:
        if not image:
            return ""
        try:
            return self.media.store("thumbnails", image)
        except MediaStorageError as exc:
            _logger.warning("Storing thumbnail for step %s failed: %s", index, exc)
            return ""

    def _attach(self, recipe_id: str, update: dict[str, object]) -> Recipe:
        updated = self._get(recipe_id).model_copy(update=update)
        self.coordinator.store.replace_recipe(updated)
        self.coordinator.replace_displayed(updated)
        _logger.info("Attached %s to recipe %s", ", ".join(update), recipe_id)
        return updated

    def _get(self, recipe_id: str) -> Recipe:
        recipe = self.coordinator.store.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe
