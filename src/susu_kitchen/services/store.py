"""Durable roster and recipe collection."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from susu_kitchen.domain.models import Profile, Recipe
from susu_kitchen.domain.seed import seed_profiles, seed_recipes

ROSTER_KEY = "susu_app_users"
RECIPES_KEY = "susu_app_recipes"

_logger = logging.getLogger(__name__)


class StateRepository(Protocol):
    """Persistence interface for whole-document application state."""

    def load(self, key: str) -> list[dict[str, object]] | None:
        """Return the stored document for ``key``, if present."""

    def save(self, key: str, value: list[dict[str, object]]) -> None:
        """Replace the stored document for ``key``."""


def now_millis() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass
class KitchenStore:
    """In-memory roster and recipes, written through to a ``StateRepository``.

    Every mutation is persisted first and swapped into memory second, so a
    failed write leaves the previous state in place.
    """

    repository: StateRepository
    profiles: list[Profile] = field(default_factory=list)
    recipes: list[Recipe] = field(default_factory=list)

    @classmethod
    def load(cls, repository: StateRepository) -> "KitchenStore":
        """Rehydrate state, seeding whichever document is missing."""
        store = cls(repository=repository)
        raw_profiles = repository.load(ROSTER_KEY)
        if raw_profiles is None:
            _logger.info("No persisted roster found; seeding defaults")
            store.save_profiles(seed_profiles())
        else:
            store.profiles = [Profile.model_validate(row) for row in raw_profiles]

        raw_recipes = repository.load(RECIPES_KEY)
        if raw_recipes is None:
            _logger.info("No persisted recipes found; seeding defaults")
            store.save_recipes(seed_recipes(now_millis()))
        else:
            store.recipes = [Recipe.model_validate(row) for row in raw_recipes]
        return store

    def get_profile(self, profile_id: str) -> Profile | None:
        return next((p for p in self.profiles if p.id == profile_id), None)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        return next((r for r in self.recipes if r.id == recipe_id), None)

    def replace_profile(self, profile: Profile) -> None:
        """Mirror a profile into the roster by identity."""
        self.save_profiles(
            [profile if p.id == profile.id else p for p in self.profiles]
        )

    def prepend_recipe(self, recipe: Recipe) -> None:
        """Add a recipe at the front of the collection (most recent first)."""
        self.save_recipes([recipe, *self.recipes])

    def replace_recipe(self, recipe: Recipe) -> None:
        """Replace a stored recipe by identity."""
        self.save_recipes([recipe if r.id == recipe.id else r for r in self.recipes])

    def save_profiles(self, profiles: list[Profile]) -> None:
        self.repository.save(
            ROSTER_KEY, [p.model_dump(mode="json") for p in profiles]
        )
        self.profiles = profiles

    def save_recipes(self, recipes: list[Recipe]) -> None:
        self.repository.save(
            RECIPES_KEY, [r.model_dump(mode="json") for r in recipes]
        )
        self.recipes = recipes
