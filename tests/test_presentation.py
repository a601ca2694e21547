from recipe_organizer.models import Difficulty, Recipe
from recipe_organizer.presentation import (
    difficulty_class,
    empty_state,
    ingredient_preview,
    total_time,
)


def test_total_time_treats_missing_as_zero():
    recipe = Recipe(id="1", title="Salad", ingredients=[], instructions="Toss.", cook_time=15)

    assert total_time(recipe) == 15


def test_ingredient_preview_truncates_after_three():
    assert ingredient_preview(["a", "b", "c"]) == "a, b, c"
    assert ingredient_preview(["a", "b", "c", "d"]) == "a, b, c..."


def test_difficulty_class():
    assert difficulty_class(Difficulty.HARD) == "badge-hard"


def test_empty_state_copy_depends_on_collection_size():
    assert empty_state(0)[0] == "No recipes yet"
    assert empty_state(5)[0] == "No recipes found"
