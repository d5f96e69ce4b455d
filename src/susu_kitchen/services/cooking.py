"""Step-by-step cooking mode with spoken instructions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from susu_kitchen.domain.cooking import CookingStep, step_action_icon
from susu_kitchen.domain.errors import GenerationError, ValidationError
from susu_kitchen.domain.models import Recipe, ViewState
from susu_kitchen.services.profiles import ProfileCoordinator

_logger = logging.getLogger(__name__)

FALLBACK_VOICE = "alloy"


class SpeechClient(Protocol):
    """Interface for text-to-speech."""

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Return audio for ``text`` spoken in ``voice``."""


@dataclass
class CookingService:
    """Walks the active profile through a recipe one step at a time."""

    coordinator: ProfileCoordinator
    speech_client: SpeechClient
    voice: str = FALLBACK_VOICE

    def start(self, recipe: Recipe) -> CookingStep:
        if not recipe.instructions:
            raise ValidationError("This recipe has no steps to cook")
        self.coordinator.navigate(ViewState.COOKING_MODE, recipe)
        return self.current_step()

    def next_step(self) -> CookingStep:
        self._require_cooking()
        self.coordinator.move_step(1)
        return self.current_step()

    def previous_step(self) -> CookingStep:
        self._require_cooking()
        self.coordinator.move_step(-1)
        return self.current_step()

    def current_step(self) -> CookingStep:
        recipe = self._require_cooking()
        index = self.coordinator.navigation.step_index
        text = recipe.instructions[index]
        thumbnails = recipe.instruction_thumbnails or []
        thumbnail = thumbnails[index] if index < len(thumbnails) else ""
        return CookingStep(
            recipe_id=recipe.id,
            index=index,
            total=len(recipe.instructions),
            text=text,
            icon=step_action_icon(text),
            thumbnail=thumbnail or None,
        )

    async def speak_current_step(self) -> bytes:
        """Return audio for the current step, trying the fallback voice once."""
        text = self.current_step().text
        for voice in dict.fromkeys([self.voice, FALLBACK_VOICE]):
            try:
                return await self.speech_client.synthesize(text, voice)
            except Exception as exc:
                _logger.warning("Speech with voice %s failed: %s", voice, exc)
        raise GenerationError("Could not read this step aloud")

    def _require_cooking(self) -> Recipe:
        navigation = self.coordinator.navigation
        if navigation.view is not ViewState.COOKING_MODE or navigation.recipe is None:
            raise ValidationError("Cooking mode is not active")
        return navigation.recipe
