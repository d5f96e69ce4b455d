"""Cooking mode models and step classification."""

from dataclasses import dataclass

_ACTION_ICONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("chop", "slice", "cut", "mince", "dice"), "🔪"),
    (("boil", "simmer", "stew", "poach"), "🍲"),
    (("fry", "sauté", "sear", "brown"), "🍳"),
    (("bake", "roast", "broil", "oven"), "🔥"),
    (("mix", "whisk", "stir", "combine", "blend"), "🥣"),
    (("serve", "plate", "garnish", "top with"), "🍽️"),
    (("wash", "rinse", "clean", "drain"), "💧"),
    (("peel", "zest"), "🍋"),
    (("pour", "add", "sprinkle", "season"), "🧂"),
    (("roll", "knead", "fold", "wrap"), "🥐"),
    (("cool", "chill", "refrigerate", "freeze"), "❄️"),
)
DEFAULT_ACTION_ICON = "👩‍🍳"


@dataclass(frozen=True)
class CookingStep:
    """One instruction as shown in cooking mode."""

    recipe_id: str
    index: int
    total: int
    text: str
    icon: str
    thumbnail: str | None

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


def step_action_icon(text: str) -> str:
    """Pick an icon for the dominant action of an instruction (first match wins)."""
    lower = text.lower()
    for keywords, icon in _ACTION_ICONS:
        if any(keyword in lower for keyword in keywords):
            return icon
    return DEFAULT_ACTION_ICON


def clamp_step(index: int, total: int) -> int:
    """Clamp a step index into the valid range for a recipe."""
    if total <= 0:
        return 0
    return max(0, min(index, total - 1))
