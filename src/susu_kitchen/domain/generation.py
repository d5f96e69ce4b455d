"""Models for generation gateway results."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from susu_kitchen.domain.models import Difficulty


class GeneratedIngredient(BaseModel):
    """Ingredient as returned by recipe structuring."""

    item: str
    amount: str
    estimated_cost: float = Field(default=0.0, ge=0.0, alias="estimatedCost")
    category: str = "Other"

    model_config = ConfigDict(populate_by_name=True)


class RecipeStructure(BaseModel):
    """Structured recipe extracted from a narration and optional photo."""

    title: str
    description: str
    servings: float = Field(gt=0)
    prep_time: str = Field(alias="prepTime")
    difficulty: Difficulty
    calories: float = Field(ge=0)
    tags: list[str]
    tips: str
    ingredients: list[GeneratedIngredient]
    instructions: list[str]

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class Citation:
    """Source backing a grounded answer."""

    label: str
    link: str


@dataclass(frozen=True)
class GroundedAnswer:
    """Answer text plus its ordered citations."""

    text: str
    sources: list[Citation] = field(default_factory=list)


@dataclass(frozen=True)
class VideoJob:
    """Status snapshot of a submitted video synthesis job."""

    id: str
    done: bool
    failed: bool = False
    error: str | None = None
