"""Active profile coordination and per-profile mutations."""

import logging
from dataclasses import dataclass, field, replace
from uuid import uuid4

from susu_kitchen.domain.cooking import clamp_step
from susu_kitchen.domain.errors import NotFoundError
from susu_kitchen.domain.models import (
    Ingredient,
    Profile,
    Recipe,
    ShoppingItem,
    ViewState,
)
from susu_kitchen.domain.scaling import adjust_multiplier, scaled_label
from susu_kitchen.services.store import KitchenStore

_logger = logging.getLogger(__name__)


def _new_token() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Navigation:
    """What the active profile is looking at.

    ``token`` changes whenever the user moves to a different screen or
    recipe, which lets in-flight work detect that its view is gone.
    """

    view: ViewState = ViewState.HOME
    recipe: Recipe | None = None
    servings_multiplier: float = 1.0
    step_index: int = 0
    token: str = field(default_factory=_new_token)


@dataclass
class ProfileCoordinator:
    """Owns the active profile and mirrors every change into the roster."""

    store: KitchenStore
    active: Profile
    navigation: Navigation = field(default_factory=Navigation)

    @classmethod
    def start(
        cls, store: KitchenStore, profile_id: str | None = None
    ) -> "ProfileCoordinator":
        """Pick the requested profile, else the first administrator, else the first."""
        if not store.profiles:
            raise NotFoundError("The roster is empty")
        active = store.get_profile(profile_id) if profile_id else None
        if active is None:
            active = next(
                (p for p in store.profiles if p.is_administrator), store.profiles[0]
            )
        return cls(store=store, active=active)

    @property
    def roster(self) -> list[Profile]:
        return self.store.profiles

    def is_current(self, token: str) -> bool:
        """Return true while the view identified by ``token`` is still shown."""
        return self.navigation.token == token

    def is_showing(self, recipe_id: str) -> bool:
        """Return true while ``recipe_id`` is the displayed recipe."""
        recipe = self.navigation.recipe
        return recipe is not None and recipe.id == recipe_id

    def switch_active(self, profile_id: str) -> Profile:
        """Make another profile active; unknown ids are ignored."""
        profile = self.store.get_profile(profile_id)
        if profile is None:
            _logger.debug("Ignoring switch to unknown profile %s", profile_id)
            return self.active
        self.active = profile
        self.navigate(ViewState.HOME)
        return profile

    def update_active_avatar(self, image_ref: str) -> Profile:
        return self._commit(self.active.model_copy(update={"avatar": image_ref}))

    def toggle_favorite(self, recipe_id: str) -> bool:
        """Flip membership of ``recipe_id`` in the favorites; return the new state."""
        favorites = list(self.active.favorites)
        if recipe_id in favorites:
            favorites = [f for f in favorites if f != recipe_id]
            is_favorite = False
        else:
            favorites.append(recipe_id)
            is_favorite = True
        self._commit(self.active.model_copy(update={"favorites": favorites}))
        return is_favorite

    def append_items(
        self, ingredients: list[Ingredient], scale: float = 1.0
    ) -> list[ShoppingItem]:
        """Copy ingredients onto the shopping list under fresh list-scoped ids."""
        new_items = [
            ShoppingItem(
                id=f"shop-{uuid4().hex}",
                item=scaled_label(ingredient.item, scale),
                amount=ingredient.amount,
                estimated_cost=ingredient.estimated_cost,
                category=ingredient.category,
                checked=False,
                scale=scale,
            )
            for ingredient in ingredients
        ]
        self._commit(
            self.active.model_copy(
                update={"shopping_list": [*self.active.shopping_list, *new_items]}
            )
        )
        return new_items

    def toggle_checked(self, item_id: str) -> None:
        self._replace_shopping_list(
            [
                item.model_copy(update={"checked": not item.checked})
                if item.id == item_id
                else item
                for item in self.active.shopping_list
            ]
        )

    def remove_item(self, item_id: str) -> None:
        self._replace_shopping_list(
            [item for item in self.active.shopping_list if item.id != item_id]
        )

    def clear_all(self) -> None:
        self._replace_shopping_list([])

    def navigate(self, view: ViewState, recipe: Recipe | None = None) -> Navigation:
        """Move to a new screen; the serving multiplier and step index reset."""
        self.navigation = Navigation(view=view, recipe=recipe)
        return self.navigation

    def open_recipe(self, recipe: Recipe) -> Navigation:
        return self.navigate(ViewState.RECIPE_DETAIL, recipe)

    def adjust_servings(self, steps: int) -> float:
        """Move the serving multiplier by half-steps, floor 0.5."""
        multiplier = adjust_multiplier(self.navigation.servings_multiplier, steps)
        self.navigation = replace(self.navigation, servings_multiplier=multiplier)
        return multiplier

    def move_step(self, delta: int) -> int:
        """Move within cooking mode, clamped to the displayed recipe's steps."""
        recipe = self.navigation.recipe
        total = len(recipe.instructions) if recipe else 0
        index = clamp_step(self.navigation.step_index + delta, total)
        self.navigation = replace(self.navigation, step_index=index)
        return index

    def replace_displayed(self, recipe: Recipe) -> None:
        """Refresh the displayed recipe in place if it is the same recipe."""
        current = self.navigation.recipe
        if current is not None and current.id == recipe.id:
            self.navigation = replace(self.navigation, recipe=recipe)

    def _replace_shopping_list(self, items: list[ShoppingItem]) -> None:
        self._commit(self.active.model_copy(update={"shopping_list": items}))

    def _commit(self, profile: Profile) -> Profile:
        self.store.replace_profile(profile)
        self.active = profile
        return profile
