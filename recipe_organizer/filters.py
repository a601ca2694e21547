"""Search and filter rules for the dashboard.

Filtering happens in memory over the whole per-user collection, which is only
reasonable while a user's collection stays small.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Type, TypeVar

from .models import Cuisine, Difficulty, Recipe

ALL = "all"

E = TypeVar("E", Cuisine, Difficulty)


def parse_choice(raw: Optional[str], enum_cls: Type[E]) -> Optional[E]:
    """Translate a select value into a filter; ``None`` means "any"."""

    if not raw or raw == ALL:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class RecipeQuery:
    text: str = ""
    cuisine: Optional[Cuisine] = None
    difficulty: Optional[Difficulty] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "RecipeQuery":
        return cls(
            text=args.get("q", ""),
            cuisine=parse_choice(args.get("cuisine"), Cuisine),
            difficulty=parse_choice(args.get("difficulty"), Difficulty),
        )

    @property
    def is_filtered(self) -> bool:
        return bool(self.text) or self.cuisine is not None or self.difficulty is not None

    def matches(self, recipe: Recipe) -> bool:
        needle = self.text.lower()
        matches_text = needle in recipe.title.lower() or any(
            needle in ingredient.lower() for ingredient in recipe.ingredients
        )
        matches_cuisine = self.cuisine is None or recipe.cuisine == self.cuisine
        matches_difficulty = self.difficulty is None or recipe.difficulty == self.difficulty
        return matches_text and matches_cuisine and matches_difficulty


def visible_recipes(recipes: Sequence[Recipe], query: RecipeQuery) -> List[Recipe]:
    """Return the recipes matching ``query`` in their original order."""

    return [recipe for recipe in recipes if query.matches(recipe)]


__all__ = ["ALL", "RecipeQuery", "parse_choice", "visible_recipes"]
