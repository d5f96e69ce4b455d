"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from susu_kitchen.api.models import (
    AskRequest,
    AvatarRequest,
    DraftEditRequest,
    NarrationRequest,
    ServingsRequest,
    SwitchProfileRequest,
    ViewRequest,
)
from susu_kitchen.app_logging import configure_logging
from susu_kitchen.containers import AppContainer
from susu_kitchen.domain.cooking import CookingStep
from susu_kitchen.domain.errors import (
    CapturePermissionError,
    GenerationError,
    KitchenError,
    MediaStorageError,
    NotFoundError,
    StaleStateError,
    ValidationError,
)
from susu_kitchen.domain.models import Recipe, ShoppingItem, ViewState
from susu_kitchen.domain.scaling import scale_ingredient
from susu_kitchen.services.drafts import DraftOrchestrator
from susu_kitchen.services.media import decode_data_url
from susu_kitchen.services.profiles import ProfileCoordinator

_NOTICE_STATUS: tuple[tuple[type[KitchenError], int], ...] = (
    (GenerationError, 502),
    (MediaStorageError, 502),
    (CapturePermissionError, 403),
    (ValidationError, 422),
    (NotFoundError, 404),
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(KitchenError)
    async def kitchen_error(request: Request, exc: KitchenError) -> JSONResponse:
        """Turn recoverable errors into dismissible notices."""
        if isinstance(exc, StaleStateError):
            logger.debug("Dropped stale result: %s", exc)
            return JSONResponse(status_code=409, content={"status": "stale"})
        status_code = next(
            (code for error, code in _NOTICE_STATUS if isinstance(exc, error)), 400
        )
        if status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
            )
        state_container: AppContainer = request.app.state.container
        return JSONResponse(
            status_code=status_code,
            content={"notice": _format_notice(state_container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profiles")
    async def list_profiles(request: Request) -> dict[str, object]:
        coordinator = _container(request).coordinator
        return {
            "active_id": coordinator.active.id,
            "profiles": [p.model_dump(mode="json") for p in coordinator.roster],
        }

    @app.get("/session")
    async def session(request: Request) -> dict[str, object]:
        return _session_payload(_container(request).coordinator)

    @app.post("/session/switch")
    async def switch_profile(
        body: SwitchProfileRequest, request: Request
    ) -> dict[str, object]:
        coordinator = _container(request).coordinator
        coordinator.switch_active(body.profile_id)
        return _session_payload(coordinator)

    @app.post("/session/view")
    async def change_view(body: ViewRequest, request: Request) -> dict[str, object]:
        """Move to another screen; leaving the create view abandons its draft."""
        state_container = _container(request)
        coordinator = state_container.coordinator
        if body.view is ViewState.RECIPE_DETAIL:
            if not body.recipe_id:
                raise ValidationError("Pick a recipe to open")
            coordinator.open_recipe(state_container.catalog.get(body.recipe_id))
        elif body.view is ViewState.CREATE_RECIPE:
            raise ValidationError("Start a new recipe with /drafts/begin")
        elif body.view is ViewState.COOKING_MODE:
            raise ValidationError("Start cooking with /recipes/{recipe_id}/cooking")
        else:
            coordinator.navigate(body.view)
        return _session_payload(coordinator)

    @app.put("/session/avatar")
    async def update_avatar(body: AvatarRequest, request: Request) -> dict[str, object]:
        state_container = _container(request)
        image = _decode(body.image, "avatar image")
        image_ref = state_container.media.store("avatars", image)
        profile = state_container.coordinator.update_active_avatar(image_ref)
        return profile.model_dump(mode="json")

    @app.get("/recipes")
    async def list_recipes(
        request: Request, tag: str | None = None
    ) -> dict[str, object]:
        state_container = _container(request)
        favorites = set(state_container.coordinator.active.favorites)
        return {
            "tag": tag,
            "recipes": [
                {**r.model_dump(mode="json"), "is_favorite": r.id in favorites}
                for r in state_container.catalog.list_recipes(tag)
            ],
        }

    @app.get("/recipes/tags")
    async def list_tags(request: Request) -> dict[str, object]:
        return {"tags": _container(request).catalog.tags()}

    @app.get("/recipes/favorites")
    async def list_favorites(request: Request) -> dict[str, object]:
        state_container = _container(request)
        recipes = state_container.catalog.favorites(
            state_container.coordinator.active
        )
        return {"recipes": [r.model_dump(mode="json") for r in recipes]}

    @app.get("/recipes/{recipe_id}")
    async def recipe_detail(recipe_id: str, request: Request) -> dict[str, object]:
        state_container = _container(request)
        recipe = state_container.catalog.get(recipe_id)
        return _detail_payload(state_container, recipe)

    @app.post("/recipes/{recipe_id}/favorite")
    async def toggle_favorite(recipe_id: str, request: Request) -> dict[str, object]:
        state_container = _container(request)
        state_container.catalog.get(recipe_id)
        is_favorite = state_container.coordinator.toggle_favorite(recipe_id)
        return {"recipe_id": recipe_id, "is_favorite": is_favorite}

    @app.post("/recipes/{recipe_id}/servings")
    async def adjust_servings(
        recipe_id: str, body: ServingsRequest, request: Request
    ) -> dict[str, object]:
        state_container = _container(request)
        _ensure_displayed(state_container, recipe_id)
        state_container.coordinator.adjust_servings(body.steps)
        recipe = state_container.coordinator.navigation.recipe
        return _detail_payload(state_container, recipe)

    @app.post("/recipes/{recipe_id}/shopping-list")
    async def add_to_shopping_list(
        recipe_id: str, request: Request
    ) -> dict[str, object]:
        state_container = _container(request)
        recipe = _ensure_displayed(state_container, recipe_id)
        coordinator = state_container.coordinator
        items = coordinator.append_items(
            recipe.ingredients, coordinator.navigation.servings_multiplier
        )
        return {"added": [_shopping_item_payload(item) for item in items]}

    @app.post("/recipes/{recipe_id}/video")
    async def recipe_video(recipe_id: str, request: Request) -> dict[str, object]:
        state_container = _container(request)
        _ensure_displayed(state_container, recipe_id)
        recipe = await state_container.enrichment.generate_video_for(recipe_id)
        return recipe.model_dump(mode="json")

    @app.post("/recipes/{recipe_id}/thumbnails")
    async def recipe_thumbnails(
        recipe_id: str, request: Request
    ) -> dict[str, object]:
        state_container = _container(request)
        _ensure_displayed(state_container, recipe_id)
        recipe = await state_container.enrichment.visualize_steps(recipe_id)
        return recipe.model_dump(mode="json")

    @app.get("/shopping-list")
    async def shopping_list(request: Request) -> dict[str, object]:
        state_container = _container(request)
        return _shopping_list_payload(state_container.coordinator)

    @app.post("/shopping-list/{item_id}/toggle")
    async def toggle_item(item_id: str, request: Request) -> dict[str, object]:
        coordinator = _container(request).coordinator
        coordinator.toggle_checked(item_id)
        return _shopping_list_payload(coordinator)

    @app.delete("/shopping-list/{item_id}")
    async def remove_item(item_id: str, request: Request) -> dict[str, object]:
        coordinator = _container(request).coordinator
        coordinator.remove_item(item_id)
        return _shopping_list_payload(coordinator)

    @app.delete("/shopping-list")
    async def clear_shopping_list(request: Request) -> dict[str, object]:
        coordinator = _container(request).coordinator
        coordinator.clear_all()
        return _shopping_list_payload(coordinator)

    @app.get("/drafts/current")
    async def current_draft(request: Request) -> dict[str, object]:
        return _draft_payload(_container(request).drafts)

    @app.post("/drafts/begin")
    async def begin_draft(request: Request) -> dict[str, object]:
        drafts = _container(request).drafts
        drafts.begin()
        return _draft_payload(drafts)

    @app.post("/drafts")
    async def submit_narration(
        body: NarrationRequest, request: Request
    ) -> dict[str, object]:
        drafts = _container(request).drafts
        audio = _decode(body.audio, "audio")
        photo = _decode(body.photo, "photo") if body.photo else None
        await drafts.submit_narration(audio, photo, body.audio_mime_type)
        return _draft_payload(drafts)

    @app.patch("/drafts/current")
    async def edit_draft(body: DraftEditRequest, request: Request) -> dict[str, object]:
        drafts = _container(request).drafts
        for name, value in body.model_dump(exclude_unset=True).items():
            drafts.edit_field(name, value)
        return _draft_payload(drafts)

    @app.post("/drafts/current/video")
    async def draft_video(request: Request) -> dict[str, object]:
        drafts = _container(request).drafts
        await drafts.generate_video()
        return _draft_payload(drafts)

    @app.post("/drafts/current/commit")
    async def commit_draft(request: Request) -> dict[str, object]:
        recipe = _container(request).drafts.commit()
        return recipe.model_dump(mode="json")

    @app.delete("/drafts/current")
    async def discard_draft(request: Request) -> dict[str, object]:
        drafts = _container(request).drafts
        drafts.discard()
        return _draft_payload(drafts)

    @app.post("/assistant/ask")
    async def ask(body: AskRequest, request: Request) -> dict[str, object]:
        state_container = _container(request)
        answer = await state_container.assistant.ask(
            body.query, state_container.coordinator.navigation.recipe
        )
        return {
            "text": answer.text,
            "sources": [
                {"label": source.label, "link": source.link}
                for source in answer.sources
            ],
        }

    @app.post("/recipes/{recipe_id}/cooking")
    async def start_cooking(recipe_id: str, request: Request) -> dict[str, object]:
        state_container = _container(request)
        recipe = state_container.catalog.get(recipe_id)
        return _step_payload(state_container.cooking.start(recipe))

    @app.get("/cooking")
    async def cooking_step(request: Request) -> dict[str, object]:
        return _step_payload(_container(request).cooking.current_step())

    @app.post("/cooking/next")
    async def next_step(request: Request) -> dict[str, object]:
        return _step_payload(_container(request).cooking.next_step())

    @app.post("/cooking/previous")
    async def previous_step(request: Request) -> dict[str, object]:
        return _step_payload(_container(request).cooking.previous_step())

    @app.get("/cooking/speech")
    async def speak_step(request: Request) -> Response:
        audio = await _container(request).cooking.speak_current_step()
        return Response(content=audio, media_type="audio/mpeg")

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _decode(value: str, label: str) -> bytes:
    try:
        return decode_data_url(value)
    except ValueError as exc:
        raise ValidationError(f"The {label} payload is not valid base64") from exc


def _ensure_displayed(state_container: AppContainer, recipe_id: str) -> Recipe:
    """Return the displayed recipe, opening ``recipe_id`` if something else is shown."""
    displayed = state_container.coordinator.navigation.recipe
    if displayed is not None and displayed.id == recipe_id:
        return displayed
    recipe = state_container.catalog.get(recipe_id)
    state_container.coordinator.open_recipe(recipe)
    return recipe


def _format_notice(state_container: AppContainer, exc: Exception) -> str:
    """Return a user-facing notice with local debug info."""
    notice = str(exc) or "Something went wrong. Please try again."
    cause = exc.__cause__
    if state_container.settings.environment == "local" and cause is not None:
        detail = f"{type(cause).__name__}: {cause}".strip()
        return f"{notice} (debug: {detail})"
    return notice


def _session_payload(coordinator: ProfileCoordinator) -> dict[str, object]:
    navigation = coordinator.navigation
    return {
        "active": coordinator.active.model_dump(mode="json"),
        "view": navigation.view.value,
        "recipe_id": navigation.recipe.id if navigation.recipe else None,
        "servings_multiplier": navigation.servings_multiplier,
    }


def _detail_payload(state_container: AppContainer, recipe: Recipe) -> dict[str, object]:
    coordinator = state_container.coordinator
    displayed = coordinator.navigation.recipe
    multiplier = (
        coordinator.navigation.servings_multiplier
        if displayed is not None and displayed.id == recipe.id
        else 1.0
    )
    author = state_container.catalog.author_of(recipe)
    return {
        "recipe": recipe.model_dump(mode="json"),
        "is_favorite": recipe.id in coordinator.active.favorites,
        "author": (
            {"id": author.id, "name": author.name, "avatar": author.avatar}
            if author
            else None
        ),
        "servings_multiplier": multiplier,
        "ingredients": [
            {
                "id": scaled.id,
                "item": scaled.item,
                "amount": scaled.amount,
                "annotation": scaled.annotation,
                "display_cost": scaled.display_cost,
            }
            for scaled in (
                scale_ingredient(ingredient, multiplier)
                for ingredient in recipe.ingredients
            )
        ],
    }


def _shopping_item_payload(item: ShoppingItem) -> dict[str, object]:
    return {**item.model_dump(mode="json"), "display_cost": item.display_cost}


def _shopping_list_payload(coordinator: ProfileCoordinator) -> dict[str, object]:
    items = coordinator.active.shopping_list
    return {
        "profile_id": coordinator.active.id,
        "items": [_shopping_item_payload(item) for item in items],
        "checked": sum(1 for item in items if item.checked),
        "total": len(items),
    }


def _draft_payload(drafts: DraftOrchestrator) -> dict[str, object]:
    draft = drafts.draft
    return {
        "state": drafts.state.value,
        "draft": draft.model_dump(mode="json") if draft else None,
    }


def _step_payload(step: CookingStep) -> dict[str, object]:
    return {
        "recipe_id": step.recipe_id,
        "index": step.index,
        "total": step.total,
        "text": step.text,
        "icon": step.icon,
        "thumbnail": step.thumbnail,
        "is_first": step.is_first,
        "is_last": step.is_last,
    }
