"""Domain models for profiles, recipes and drafts."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ProfileRole(StrEnum):
    """Role of a profile in the family roster."""

    ADMINISTRATOR = "administrator"
    MEMBER = "member"


class Difficulty(StrEnum):
    """Recipe difficulty label."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class ViewState(StrEnum):
    """Top-level screen the active profile is looking at."""

    HOME = "HOME"
    RECIPE_DETAIL = "RECIPE_DETAIL"
    CREATE_RECIPE = "CREATE_RECIPE"
    SHOPPING_LIST = "SHOPPING_LIST"
    COOKING_MODE = "COOKING_MODE"


class Ingredient(BaseModel):
    """Ingredient line of a recipe. The amount is an opaque label."""

    model_config = ConfigDict(frozen=True)

    id: str
    item: str
    amount: str
    estimated_cost: float = Field(default=0.0, ge=0.0)
    category: str = "Other"


class ShoppingItem(BaseModel):
    """Entry on a profile's personal shopping list."""

    model_config = ConfigDict(frozen=True)

    id: str
    item: str
    amount: str
    estimated_cost: float = Field(default=0.0, ge=0.0)
    category: str = "Other"
    checked: bool = False
    scale: float = Field(default=1.0, gt=0.0)

    @property
    def display_cost(self) -> float:
        """Cost adjusted by the serving multiplier used when the item was added."""
        return round(self.estimated_cost * self.scale, 2)


class Profile(BaseModel):
    """Member of the family roster."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: ProfileRole = ProfileRole.MEMBER
    avatar: str = ""
    favorites: list[str] = Field(default_factory=list)
    shopping_list: list[ShoppingItem] = Field(default_factory=list)

    @property
    def is_administrator(self) -> bool:
        return self.role is ProfileRole.ADMINISTRATOR


class Recipe(BaseModel):
    """Saved recipe in the collection."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    # Index-aligned with instructions; "" means not generated yet.
    instruction_thumbnails: list[str] | None = None
    tips: str = ""
    image_url: str | None = None
    video_url: str | None = None
    author_id: str
    created_at: int
    tags: list[str] = Field(default_factory=list)
    servings: int = 1
    prep_time: str = ""
    cook_time: str | None = None
    difficulty: Difficulty | None = None
    calories: int | None = None


class Draft(BaseModel):
    """Recipe under review. Fields stay optional until commit."""

    token: str
    title: str = ""
    description: str = ""
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tips: str = ""
    image_url: str | None = None
    video_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    servings: int | None = None
    prep_time: str = ""
    difficulty: Difficulty | None = None
    calories: int | None = None
