"""Display helpers registered as Jinja filters."""

from __future__ import annotations

from typing import Sequence

from .models import Cuisine, Difficulty, Recipe

INGREDIENT_PREVIEW_COUNT = 3

DIFFICULTY_CLASSES = {
    Difficulty.EASY: "badge-easy",
    Difficulty.MEDIUM: "badge-medium",
    Difficulty.HARD: "badge-hard",
}

CUISINE_OPTIONS = [cuisine.value for cuisine in Cuisine]
DIFFICULTY_OPTIONS = [difficulty.value for difficulty in Difficulty]


def total_time(recipe: Recipe) -> int:
    return (recipe.prep_time or 0) + (recipe.cook_time or 0)


def ingredient_preview(ingredients: Sequence[str]) -> str:
    preview = ", ".join(ingredients[:INGREDIENT_PREVIEW_COUNT])
    if len(ingredients) > INGREDIENT_PREVIEW_COUNT:
        preview += "..."
    return preview


def difficulty_class(difficulty: Difficulty) -> str:
    return DIFFICULTY_CLASSES.get(difficulty, "")


def empty_state(collection_size: int) -> tuple[str, str]:
    if collection_size == 0:
        return (
            "No recipes yet",
            "Start building your recipe collection by adding your first recipe!",
        )
    return (
        "No recipes found",
        "Try adjusting your search or filters to find what you're looking for.",
    )


__all__ = [
    "CUISINE_OPTIONS",
    "DIFFICULTY_OPTIONS",
    "difficulty_class",
    "empty_state",
    "ingredient_preview",
    "total_time",
]
