"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, Field

from susu_kitchen.domain.models import ViewState


class SwitchProfileRequest(BaseModel):
    profile_id: str


class AvatarRequest(BaseModel):
    """New avatar as a base64 string or data URL."""

    image: str


class NarrationRequest(BaseModel):
    """Recorded narration plus an optional dish photo, base64 encoded."""

    audio: str
    audio_mime_type: str = "audio/webm"
    photo: str | None = None


class DraftEditRequest(BaseModel):
    """Reviewable draft fields; only the fields sent are applied."""

    title: str | None = None
    description: str | None = None
    difficulty: str | None = None
    calories: int | None = Field(default=None, ge=0)


class ServingsRequest(BaseModel):
    """Number of half-serving steps to move the multiplier by."""

    steps: int


class AskRequest(BaseModel):
    query: str


class ViewRequest(BaseModel):
    """Screen to show; ``recipe_id`` is required for the recipe detail view."""

    view: ViewState
    recipe_id: str | None = None
