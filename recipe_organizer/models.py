from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Cuisine(str, Enum):
    ITALIAN = "italian"
    MEXICAN = "mexican"
    ASIAN = "asian"
    AMERICAN = "american"
    FRENCH = "french"
    INDIAN = "indian"
    MEDITERRANEAN = "mediterranean"
    OTHER = "other"


@dataclass
class Recipe:
    """Domain object representing a stored recipe owned by a single user."""

    id: str
    title: str
    ingredients: List[str]
    instructions: str
    difficulty: Difficulty = Difficulty.MEDIUM
    cuisine: Cuisine = Cuisine.OTHER
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Recipe":
        """Build a recipe from a stored document.

        Unknown enum values fall back to the form defaults so that a document
        edited outside the application still lists.
        """

        ingredients = data.get("ingredients")
        if isinstance(ingredients, str):
            parsed_ingredients = [line for line in ingredients.splitlines() if line.strip()]
        elif isinstance(ingredients, list):
            parsed_ingredients = [str(item) for item in ingredients]
        else:
            parsed_ingredients = []

        created_at = data.get("created_at")

        return cls(
            id=doc_id,
            title=data.get("title", ""),
            ingredients=parsed_ingredients,
            instructions=data.get("instructions", ""),
            difficulty=coerce_enum(Difficulty, data.get("difficulty"), Difficulty.MEDIUM),
            cuisine=coerce_enum(Cuisine, data.get("cuisine"), Cuisine.OTHER),
            prep_time=data.get("prep_time"),
            cook_time=data.get("cook_time"),
            servings=data.get("servings"),
            created_at=created_at if isinstance(created_at, datetime) else None,
            user_id=data.get("user_id"),
        )


@dataclass
class RecipeDraft:
    """Unsaved, editable copy of a recipe's fields.

    Blank ingredient entries are allowed here so the editor can always offer
    an empty trailing row.
    """

    title: str = ""
    ingredients: List[str] = field(default_factory=lambda: [""])
    instructions: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    cuisine: Cuisine = Cuisine.OTHER
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = 4

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeDraft":
        return cls(
            title=recipe.title,
            ingredients=list(recipe.ingredients) or [""],
            instructions=recipe.instructions,
            difficulty=recipe.difficulty,
            cuisine=recipe.cuisine,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            servings=recipe.servings,
        )


@dataclass(frozen=True)
class RecipeFields:
    """Normalized recipe content ready to be sent to the store."""

    title: str
    ingredients: Tuple[str, ...]
    instructions: str
    difficulty: Difficulty
    cuisine: Cuisine
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "difficulty": self.difficulty.value,
            "cuisine": self.cuisine.value,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "servings": self.servings,
        }


def normalize_for_submission(draft: RecipeDraft) -> RecipeFields:
    """Drop blank ingredient rows. Every other field is passed through untouched."""

    return RecipeFields(
        title=draft.title,
        ingredients=tuple(item for item in draft.ingredients if item.strip() != ""),
        instructions=draft.instructions,
        difficulty=draft.difficulty,
        cuisine=draft.cuisine,
        prep_time=draft.prep_time,
        cook_time=draft.cook_time,
        servings=draft.servings,
    )


def coerce_enum(enum_cls, value, default):
    """Return ``enum_cls(value)``, or ``default`` when the value is not a member."""

    try:
        return enum_cls(value)
    except ValueError:
        return default


__all__ = [
    "Cuisine",
    "Difficulty",
    "Recipe",
    "RecipeDraft",
    "RecipeFields",
    "coerce_enum",
    "normalize_for_submission",
]
