from __future__ import annotations

from pathlib import Path
import sys
import uuid
from datetime import datetime, timedelta

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipe_organizer import create_app
from recipe_organizer.auth import AuthenticationError, SessionContext
from recipe_organizer.models import Cuisine, Difficulty, Recipe, RecipeFields
from recipe_organizer.storage import RecipeNotFoundError, StorageError


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self._recipes: list[Recipe] = []
        self._clock = datetime(2024, 1, 1, 12, 0, 0)
        self.fail_with: dict[str, str] = {}
        self.calls: list[tuple] = []

    def list_recipes(self, owner_id: str):
        self._maybe_fail("list")
        owned = [recipe for recipe in self._recipes if recipe.user_id == owner_id]
        return sorted(owned, key=lambda recipe: recipe.created_at or datetime.min, reverse=True)

    def add_recipe(self, owner_id: str, fields: RecipeFields) -> Recipe:
        self.calls.append(("add", owner_id))
        self._maybe_fail("add")
        self._clock += timedelta(minutes=1)
        recipe = Recipe.from_document(uuid.uuid4().hex, {**fields.to_document(), "user_id": owner_id})
        recipe.created_at = self._clock
        self._recipes.append(recipe)
        return recipe

    def update_recipe(self, owner_id: str, recipe_id: str, fields: RecipeFields) -> Recipe:
        self.calls.append(("update", owner_id, recipe_id))
        self._maybe_fail("update")
        recipe = self._owned(owner_id, recipe_id)
        updated = Recipe.from_document(recipe_id, {**fields.to_document(), "user_id": owner_id})
        recipe.title = updated.title
        recipe.ingredients = updated.ingredients
        recipe.instructions = updated.instructions
        recipe.difficulty = updated.difficulty
        recipe.cuisine = updated.cuisine
        recipe.prep_time = updated.prep_time
        recipe.cook_time = updated.cook_time
        recipe.servings = updated.servings
        return recipe

    def delete_recipe(self, owner_id: str, recipe_id: str) -> None:
        self.calls.append(("delete", owner_id, recipe_id))
        self._maybe_fail("delete")
        self._recipes.remove(self._owned(owner_id, recipe_id))

    def get(self, recipe_id: str) -> Recipe:
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        raise KeyError(recipe_id)

    def all(self) -> list[Recipe]:
        return list(self._recipes)

    def _owned(self, owner_id: str, recipe_id: str) -> Recipe:
        for recipe in self._recipes:
            if recipe.id == recipe_id and recipe.user_id == owner_id:
                return recipe
        raise RecipeNotFoundError(f"Recipe '{recipe_id}' does not exist.")

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_with:
            raise StorageError(self.fail_with[operation])


class InMemoryIdentityProvider:
    def __init__(self) -> None:
        self._users: dict[str, tuple[str, str]] = {}

    def sign_up(self, email: str, password: str) -> SessionContext:
        email = email.strip().lower()
        if email in self._users:
            raise AuthenticationError("An account with this email already exists.")
        if len(password) < 6:
            raise AuthenticationError("Password must be at least 6 characters long.")
        user_id = uuid.uuid4().hex
        self._users[email] = (user_id, password)
        return SessionContext(user_id=user_id, email=email)

    def sign_in(self, email: str, password: str) -> SessionContext:
        email = email.strip().lower()
        user = self._users.get(email)
        if user is None or user[1] != password:
            raise AuthenticationError("Invalid email or password.")
        return SessionContext(user_id=user[0], email=email)


def make_fields(
    title: str = "Tacos",
    ingredients: tuple = ("tortillas", "beef"),
    instructions: str = "Assemble.",
    difficulty: str = "easy",
    cuisine: str = "mexican",
    **extra,
) -> RecipeFields:
    return RecipeFields(
        title=title,
        ingredients=tuple(ingredients),
        instructions=instructions,
        difficulty=Difficulty(difficulty),
        cuisine=Cuisine(cuisine),
        **extra,
    )


@pytest.fixture
def storage() -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage()


@pytest.fixture
def identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def app(storage, identity):
    app = create_app(storage=storage, identity=identity)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def user(identity) -> SessionContext:
    return identity.sign_up("cook@example.com", "secret123")


@pytest.fixture
def client(app, user):
    client = app.test_client()
    with client.session_transaction() as session:
        session["user_id"] = user.user_id
        session["email"] = user.email
    return client
