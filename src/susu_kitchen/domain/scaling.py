"""Serving-scale display helpers.

Scaling is cosmetic: the amount text of an ingredient is a free-form label,
so only the cost is multiplied and the amount gets an ``(xN)`` annotation.
"""

from dataclasses import dataclass

from susu_kitchen.domain.models import Ingredient

MULTIPLIER_STEP = 0.5
MIN_MULTIPLIER = 0.5


@dataclass(frozen=True)
class ScaledIngredient:
    """Display view of an ingredient at a given serving multiplier."""

    id: str
    item: str
    amount: str
    annotation: str | None
    display_cost: float


def format_multiplier(multiplier: float) -> str:
    """Render a multiplier without a trailing ``.0``."""
    return f"{multiplier:g}"


def annotation_for(multiplier: float) -> str | None:
    """Return the ``(xN)`` annotation, or None at the default scale."""
    if multiplier == 1:
        return None
    return f"(x{format_multiplier(multiplier)})"


def scaled_label(text: str, multiplier: float) -> str:
    """Append the scale annotation to a label when the multiplier is not 1."""
    annotation = annotation_for(multiplier)
    if annotation is None:
        return text
    return f"{text} {annotation}"


def scaled_cost(estimated_cost: float, multiplier: float) -> float:
    return round(estimated_cost * multiplier, 2)


def scale_ingredient(ingredient: Ingredient, multiplier: float = 1.0) -> ScaledIngredient:
    """Build the display view of an ingredient without touching its amount."""
    if multiplier <= 0:
        raise ValueError("multiplier must be positive")
    return ScaledIngredient(
        id=ingredient.id,
        item=ingredient.item,
        amount=ingredient.amount,
        annotation=annotation_for(multiplier),
        display_cost=scaled_cost(ingredient.estimated_cost, multiplier),
    )


def adjust_multiplier(current: float, steps: int) -> float:
    """Move the multiplier by whole steps of 0.5, never below 0.5."""
    return max(MIN_MULTIPLIER, current + steps * MULTIPLIER_STEP)
