"""Browsing the recipe collection."""

from dataclasses import dataclass

from susu_kitchen.domain.errors import NotFoundError
from susu_kitchen.domain.models import Profile, Recipe
from susu_kitchen.services.store import KitchenStore


@dataclass
class CatalogService:
    """Read-only views over the recipe collection."""

    store: KitchenStore

    def list_recipes(self, tag: str | None = None) -> list[Recipe]:
        """Return recipes most recent first, optionally filtered by tag."""
        if not tag:
            return list(self.store.recipes)
        return [recipe for recipe in self.store.recipes if tag in recipe.tags]

    def tags(self) -> list[str]:
        return sorted({tag for recipe in self.store.recipes for tag in recipe.tags})

    def favorites(self, profile: Profile) -> list[Recipe]:
        """Favorites of ``profile`` that still exist; stale ids are skipped."""
        by_id = {recipe.id: recipe for recipe in self.store.recipes}
        return [by_id[rid] for rid in profile.favorites if rid in by_id]

    def get(self, recipe_id: str) -> Recipe:
        recipe = self.store.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    def author_of(self, recipe: Recipe) -> Profile | None:
        return self.store.get_profile(recipe.author_id)
