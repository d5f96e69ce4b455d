"""Narration-to-recipe draft workflow."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import uuid4

from susu_kitchen.domain.errors import (
    CapturePermissionError,
    StaleStateError,
    ValidationError,
)
from susu_kitchen.domain.generation import RecipeStructure
from susu_kitchen.domain.models import Difficulty, Draft, Ingredient, Recipe, ViewState
from susu_kitchen.services.generation import GenerationGateway
from susu_kitchen.services.media import MediaService
from susu_kitchen.services.profiles import ProfileCoordinator
from susu_kitchen.services.store import now_millis
from susu_kitchen.services.videos import VideoRenderer

_logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "description", "difficulty", "calories"})


class DraftState(StrEnum):
    """Stage of the recipe creation flow."""

    CAPTURING = "CAPTURING"
    REVIEWING = "REVIEWING"


@dataclass
class DraftOrchestrator:
    """State machine taking a narration to a reviewed, committed recipe.

    A draft is owned by the create view it was generated in: leaving that view
    (including switching profiles) abandons it, and so does ``discard``.
    Detached work checks the draft token before attaching anything.
    """

    coordinator: ProfileCoordinator
    gateway: GenerationGateway
    media: MediaService
    videos: VideoRenderer
    _draft: Draft | None = field(default=None, init=False)
    _view_token: str | None = field(default=None, init=False)
    _generating: bool = field(default=False, init=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    @property
    def draft(self) -> Draft | None:
        """The live draft, if any."""
        if self._draft is not None and not self.coordinator.is_current(
            self._view_token or ""
        ):
            _logger.info("Abandoning draft %s after navigation", self._draft.token)
            self._clear()
        return self._draft

    @property
    def state(self) -> DraftState:
        return DraftState.REVIEWING if self.draft is not None else DraftState.CAPTURING

    def begin(self) -> None:
        """Open the create view in the capturing state."""
        self._require_author()
        self._clear()
        self.coordinator.navigate(ViewState.CREATE_RECIPE)

    async def submit_narration(
        self,
        audio: bytes,
        photo: bytes | None = None,
        audio_mime_type: str = "audio/webm",
    ) -> Draft:
        """Generate a draft from a narration; state is unchanged on failure."""
        self._require_author()
        if not audio:
            raise CapturePermissionError(
                "No audio was captured. Check microphone permissions."
            )
        if self.state is DraftState.REVIEWING:
            raise ValidationError("A draft is already under review")
        if self._generating:
            raise ValidationError("A recipe is already being generated")
        if self.coordinator.navigation.view is not ViewState.CREATE_RECIPE:
            self.coordinator.navigate(ViewState.CREATE_RECIPE)
        view_token = self.coordinator.navigation.token

        self._generating = True
        try:
            structure = await self.gateway.transcribe_and_structure(
                audio, photo, audio_mime_type
            )
        finally:
            self._generating = False
        if not self.coordinator.is_current(view_token):
            raise StaleStateError("The create view was left during generation")

        image_url = self.media.store("photos", photo) if photo else None

        draft = _draft_from_structure(structure, image_url)
        self._draft = draft
        self._view_token = view_token
        _logger.info("Draft %s ready for review: %s", draft.token, draft.title)
        if photo is None and draft.title and draft.description:
            self._spawn(
                self._attach_hero_image(draft.token, draft.title, draft.description)
            )
        return draft

    def edit_field(self, name: str, value: object) -> Draft:
        """Edit one of the reviewable fields of the live draft."""
        draft = self._require_draft()
        if name not in EDITABLE_FIELDS:
            raise ValidationError(f"Field {name!r} cannot be edited")
        setattr(draft, name, _coerce_field(name, value))
        return draft

    async def generate_video(self) -> Draft:
        """Render a video for the live draft and attach it."""
        draft = self._require_draft()
        if not draft.title.strip():
            raise ValidationError("A title is needed before making a video")
        token = draft.token
        video_url = await self.videos.render(
            draft.title, draft.image_url, is_live=lambda: self._is_live(token)
        )
        if not self._is_live(token):
            raise StaleStateError(f"Draft {token} was discarded during rendering")
        live = self._require_draft()
        live.video_url = video_url
        return live

    def commit(self) -> Recipe:
        """Promote the live draft to a recipe at the top of the collection."""
        draft = self._require_draft()
        title = draft.title.strip()
        if not title:
            raise ValidationError("A recipe needs a title before it can be saved")
        recipe = Recipe(
            id=f"rec-{uuid4().hex}",
            title=title,
            description=draft.description,
            ingredients=draft.ingredients,
            instructions=draft.instructions,
            tips=draft.tips,
            image_url=draft.image_url,
            video_url=draft.video_url,
            author_id=self.coordinator.active.id,
            created_at=now_millis(),
            tags=draft.tags,
            servings=draft.servings or 1,
            prep_time=draft.prep_time,
            difficulty=draft.difficulty,
            calories=draft.calories,
        )
        self.coordinator.store.prepend_recipe(recipe)
        self._clear()
        self.coordinator.navigate(ViewState.HOME)
        _logger.info("Saved recipe %s (%s)", recipe.id, recipe.title)
        return recipe

    def discard(self) -> None:
        """Drop the draft and return to capturing."""
        self._clear()

    async def drain(self) -> None:
        """Wait for detached tasks to settle."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _attach_hero_image(self, token: str, title: str, description: str) -> None:
        try:
            image = await self.gateway.synthesize_hero_image(title, description)
        except Exception as exc:
            _logger.warning("Hero image for draft %s failed: %s", token, exc)
            return
        if not self._is_live(token):
            _logger.debug("Dropping hero image for abandoned draft %s", token)
            return
        try:
            image_url = self.media.store("images", image)
        except Exception as exc:
            _logger.warning("Storing hero image for draft %s failed: %s", token, exc)
            return
        self._require_draft().image_url = image_url

    def _spawn(self, coro: Coroutine[object, object, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_live(self, token: str) -> bool:
        draft = self.draft
        return draft is not None and draft.token == token

    def _require_draft(self) -> Draft:
        draft = self.draft
        if draft is None:
            raise ValidationError("There is no draft under review")
        return draft

    def _require_author(self) -> None:
        if not self.coordinator.active.is_administrator:
            raise ValidationError("Only administrators can author recipes")

    def _clear(self) -> None:
        self._draft = None
        self._view_token = None


def _draft_from_structure(structure: RecipeStructure, image_url: str | None) -> Draft:
    return Draft(
        token=uuid4().hex,
        title=structure.title,
        description=structure.description,
        ingredients=[
            Ingredient(
                id=f"ing-{uuid4().hex}",
                item=ingredient.item,
                amount=ingredient.amount,
                estimated_cost=ingredient.estimated_cost,
                category=ingredient.category,
            )
            for ingredient in structure.ingredients
        ],
        instructions=structure.instructions,
        tips=structure.tips,
        image_url=image_url,
        tags=structure.tags,
        servings=max(1, round(structure.servings)),
        prep_time=structure.prep_time,
        difficulty=structure.difficulty,
        calories=round(structure.calories),
    )


def _coerce_field(name: str, value: object) -> object:
    if name in {"title", "description"}:
        if not isinstance(value, str):
            raise ValidationError(f"{name} must be text")
        return value
    if value is None or value == "":
        return None
    if name == "difficulty":
        try:
            return Difficulty(value)
        except ValueError as exc:
            raise ValidationError("difficulty must be Easy, Medium or Hard") from exc
    try:
        calories = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("calories must be a whole number") from exc
    if calories < 0:
        raise ValidationError("calories cannot be negative")
    return calories
