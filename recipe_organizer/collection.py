"""The per-user recipe collection and its synchronisation with the store.

The local list is only ever replaced wholesale by :meth:`CollectionStore.load`.
Mutations go to the repository and are followed by a full reload; there is no
optimistic patching, and concurrent sessions resolve as last write wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Type

from .errors import CreateFailed, DeleteFailed, FetchFailed, RecipeError, UpdateFailed
from .filters import RecipeQuery, visible_recipes
from .models import Recipe, RecipeFields
from .storage import RecipeRepository, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: Optional[str] = None
    category: str = "success"

    @property
    def message(self) -> str:
        if self.description:
            return f"{self.title}: {self.description}"
        return self.title


Notifier = Callable[[Notification], None]


class CollectionStore:
    """Authoritative in-memory copy of one user's recipes."""

    def __init__(
        self,
        repository: RecipeRepository,
        owner_id: str,
        notify: Optional[Notifier] = None,
    ) -> None:
        self._repository = repository
        self._owner_id = owner_id
        self._notify = notify
        self._recipes: Tuple[Recipe, ...] = ()
        self._closed = False
        self.loading = False
        self.error: Optional[RecipeError] = None
        self.notifications: List[Notification] = []

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def recipes(self) -> Tuple[Recipe, ...]:
        return self._recipes

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear the store down; late results are discarded from now on."""

        self._closed = True

    def find(self, recipe_id: str) -> Optional[Recipe]:
        return next((recipe for recipe in self._recipes if recipe.id == recipe_id), None)

    def visible(self, query: RecipeQuery) -> List[Recipe]:
        return visible_recipes(self._recipes, query)

    def load(self) -> bool:
        self.loading = True
        try:
            fetched = list(self._repository.list_recipes(self._owner_id))
        except StorageError as exc:
            self._fail(FetchFailed, "Error fetching recipes", "list", exc)
            return False
        finally:
            self.loading = False

        if self._closed:
            logger.debug("Discarding recipe list for %s after close", self._owner_id)
            return False

        self._recipes = tuple(fetched)
        self.error = None
        return True

    def create(self, fields: RecipeFields) -> bool:
        try:
            self._repository.add_recipe(self._owner_id, fields)
        except StorageError as exc:
            self._fail(CreateFailed, "Error creating recipe", "create", exc)
            return False
        return self._settle("Recipe created successfully")

    def update(self, recipe_id: str, fields: RecipeFields) -> bool:
        try:
            self._repository.update_recipe(self._owner_id, recipe_id, fields)
        except StorageError as exc:
            self._fail(UpdateFailed, "Error updating recipe", "update", exc)
            return False
        return self._settle("Recipe updated successfully")

    def remove(self, recipe_id: str) -> bool:
        try:
            self._repository.delete_recipe(self._owner_id, recipe_id)
        except StorageError as exc:
            self._fail(DeleteFailed, "Error deleting recipe", "delete", exc)
            return False
        return self._settle("Recipe deleted successfully")

    def _settle(self, title: str) -> bool:
        self.error = None
        self._emit(Notification(title))
        # The write has succeeded even if this reload fails.
        self.load()
        return True

    def _fail(
        self,
        error_cls: Type[RecipeError],
        title: str,
        operation: str,
        exc: StorageError,
    ) -> None:
        message = str(exc)
        logger.warning(
            "Recipe %s failed for %s: %s",
            operation,
            self._owner_id,
            message,
            extra={"operation": operation, "owner_id": self._owner_id},
        )
        self.error = error_cls(message)
        self._emit(Notification(title, message, "error"))

    def _emit(self, notification: Notification) -> None:
        if self._closed:
            return
        self.notifications.append(notification)
        if self._notify is not None:
            self._notify(notification)


class DeleteConfirmation:
    """Holds at most one recipe id waiting for the user to confirm deletion."""

    def __init__(self, pending_id: Optional[str] = None) -> None:
        self.pending_id = pending_id

    @property
    def is_pending(self) -> bool:
        return self.pending_id is not None

    def request(self, recipe_id: str) -> None:
        self.pending_id = recipe_id

    def cancel(self) -> None:
        self.pending_id = None

    def confirm(self, store: CollectionStore) -> bool:
        if self.pending_id is None:
            return False
        recipe_id, self.pending_id = self.pending_id, None
        return store.remove(recipe_id)


__all__ = ["CollectionStore", "DeleteConfirmation", "Notification", "Notifier"]
