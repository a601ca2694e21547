from __future__ import annotations

from typing import Iterable, Protocol

from .models import Recipe, RecipeFields


class StorageError(Exception):
    """A remote store call failed; ``str(exc)`` is shown to the user."""


class RecipeNotFoundError(StorageError, KeyError):
    """The recipe does not exist or belongs to another user."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Recipe not found."


def remote_message(exc: Exception) -> str:
    """The human-readable part of a google.api_core error."""

    # RetryError and call errors carry ``message``; the GoogleAPIError base does not.
    return getattr(exc, "message", None) or str(exc)


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the collection store.

    Every call is scoped to ``owner_id``; records owned by anyone else are
    invisible to it.
    """

    def list_recipes(self, owner_id: str) -> Iterable[Recipe]:
        """Return the owner's recipes ordered newest first."""

    def add_recipe(self, owner_id: str, fields: RecipeFields) -> Recipe:
        """Persist a new recipe and return the stored instance."""

    def update_recipe(self, owner_id: str, recipe_id: str, fields: RecipeFields) -> Recipe:
        """Overwrite an existing recipe's fields and return the new representation."""

    def delete_recipe(self, owner_id: str, recipe_id: str) -> None:
        """Remove a recipe."""


__all__ = ["RecipeNotFoundError", "RecipeRepository", "StorageError", "remote_message"]
