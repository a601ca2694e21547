from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from .collection import CollectionStore
from .errors import RecipeError, ValidationFailed
from .models import Recipe, RecipeDraft, normalize_for_submission


class FormState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


def parse_count(raw: Optional[str], minimum: int) -> Optional[int]:
    """Parse a numeric form input; an empty value means unset.

    Raises :class:`ValueError` for anything that is not a whole number of at
    least ``minimum``.
    """

    if raw is None or raw.strip() == "":
        return None
    value = int(raw.strip())
    if value < minimum:
        raise ValueError(f"must be at least {minimum}")
    return value


class RecipeForm:
    """Editing session for a single recipe draft.

    A form seeded from an existing :class:`Recipe` submits an update for that
    recipe's id; otherwise it submits a create.
    """

    def __init__(self, recipe: Optional[Recipe] = None, draft: Optional[RecipeDraft] = None) -> None:
        self.recipe_id: Optional[str] = recipe.id if recipe is not None else None
        if draft is None:
            draft = RecipeDraft.from_recipe(recipe) if recipe is not None else RecipeDraft()
        if not draft.ingredients:
            draft.ingredients = [""]
        self._draft: Optional[RecipeDraft] = draft
        self.state = FormState.EDITING
        self.error: Optional[RecipeError] = None
        self.field_errors: Dict[str, str] = {}

    @classmethod
    def resume(cls, draft: RecipeDraft, recipe_id: Optional[str] = None) -> "RecipeForm":
        """Reopen a session from a posted draft, keeping the original recipe id."""

        form = cls(draft=draft)
        form.recipe_id = recipe_id
        return form

    @property
    def is_update(self) -> bool:
        return self.recipe_id is not None

    @property
    def draft(self) -> RecipeDraft:
        if self._draft is None:
            raise RuntimeError("No recipe is being edited.")
        return self._draft

    def add_ingredient_slot(self) -> None:
        self.draft.ingredients.append("")

    def remove_ingredient_slot(self, index: int) -> bool:
        ingredients = self.draft.ingredients
        if len(ingredients) <= 1 or not 0 <= index < len(ingredients):
            return False
        del ingredients[index]
        return True

    def set_ingredient(self, index: int, value: str) -> None:
        self.draft.ingredients[index] = value

    def validate(self) -> Dict[str, str]:
        draft = self.draft
        errors: Dict[str, str] = {}
        if not draft.title.strip():
            errors["title"] = "Please provide a recipe title."
        if not any(item.strip() for item in draft.ingredients):
            errors["ingredients"] = "Please add at least one ingredient."
        if not draft.instructions.strip():
            errors["instructions"] = "Please provide instructions."
        return errors

    def submit(self, store: CollectionStore) -> bool:
        errors = self.validate()
        if errors:
            self.field_errors = errors
            self.error = ValidationFailed(errors)
            return False

        self.field_errors = {}
        fields = normalize_for_submission(self.draft)
        if self.recipe_id is not None:
            saved = store.update(self.recipe_id, fields)
        else:
            saved = store.create(fields)

        if not saved:
            self.error = store.error
            return False

        self._close()
        return True

    def cancel(self) -> None:
        self._close()

    def _close(self) -> None:
        self._draft = None
        self.error = None
        self.field_errors = {}
        self.state = FormState.IDLE


__all__ = ["FormState", "RecipeForm", "parse_count"]
