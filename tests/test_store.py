"""Tests for the persisted roster and recipe collection."""

import pytest

from susu_kitchen.domain.models import Profile, Recipe
from susu_kitchen.services.store import RECIPES_KEY, ROSTER_KEY, KitchenStore
from tests.conftest import InMemoryStateRepository


def test_load_seeds_and_persists_when_nothing_is_stored() -> None:
    repository = InMemoryStateRepository()

    store = KitchenStore.load(repository)

    assert [p.id for p in store.profiles] == ["susu", "dad", "kid1", "kid2"]
    assert [r.id for r in store.recipes][:2] == ["rec-1", "rec-2"]
    assert len(store.recipes) == 6
    assert repository.saved_keys == [ROSTER_KEY, RECIPES_KEY]


def test_load_prefers_persisted_state_over_seed() -> None:
    repository = InMemoryStateRepository(
        documents={
            ROSTER_KEY: [{"id": "nonna", "name": "Nonna", "role": "administrator"}],
            RECIPES_KEY: [],
        }
    )

    store = KitchenStore.load(repository)

    assert [p.id for p in store.profiles] == ["nonna"]
    assert store.profiles[0].is_administrator
    assert store.recipes == []
    assert repository.saved_keys == []


def test_load_seeds_only_the_missing_document() -> None:
    repository = InMemoryStateRepository(
        documents={ROSTER_KEY: [{"id": "nonna", "name": "Nonna"}]}
    )

    store = KitchenStore.load(repository)

    assert [p.id for p in store.profiles] == ["nonna"]
    assert len(store.recipes) == 6
    assert repository.saved_keys == [RECIPES_KEY]


def test_state_survives_a_reload() -> None:
    repository = InMemoryStateRepository()
    store = KitchenStore.load(repository)
    susu = store.get_profile("susu")
    store.replace_profile(susu.model_copy(update={"favorites": ["rec-2"]}))
    store.prepend_recipe(
        Recipe(id="rec-new", title="Focaccia", author_id="susu", created_at=1)
    )

    reloaded = KitchenStore.load(repository)

    assert reloaded.get_profile("susu").favorites == ["rec-2"]
    assert reloaded.recipes[0].id == "rec-new"
    assert reloaded.get_recipe("rec-new").title == "Focaccia"


def test_failed_write_leaves_memory_untouched(store: KitchenStore) -> None:
    store.repository.fail_saves = True
    before = list(store.profiles)

    with pytest.raises(RuntimeError):
        store.replace_profile(Profile(id="susu", name="Renamed"))

    assert store.profiles == before
    assert store.get_profile("susu").name == "Susu"


def test_replace_recipe_by_identity(store: KitchenStore) -> None:
    updated = store.get_recipe("rec-3").model_copy(update={"video_url": "memory://v"})

    store.replace_recipe(updated)

    assert store.get_recipe("rec-3").video_url == "memory://v"
    assert [r.id for r in store.recipes][:3] == ["rec-1", "rec-2", "rec-3"]
