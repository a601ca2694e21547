from recipe_organizer.filters import RecipeQuery, parse_choice, visible_recipes
from recipe_organizer.models import Cuisine, Difficulty, Recipe


def _recipe(id, title, cuisine="other", difficulty="medium", ingredients=()):
    return Recipe(
        id=id,
        title=title,
        ingredients=list(ingredients),
        instructions="Cook.",
        cuisine=Cuisine(cuisine),
        difficulty=Difficulty(difficulty),
    )


COLLECTION = [
    _recipe("1", "Tacos", "mexican", "easy", ["Tortillas", "Beef"]),
    _recipe("2", "Ramen", "asian", "medium", ["Noodles", "Pork belly"]),
    _recipe("3", "Pasta Bake", "italian", "hard", ["Pasta", "Cheese"]),
    _recipe("4", "Beef Stew", "american", "medium", ["Beef", "Carrots"]),
]


def test_empty_query_returns_whole_collection():
    query = RecipeQuery.from_args({"q": "", "cuisine": "all", "difficulty": "all"})

    assert visible_recipes(COLLECTION, query) == COLLECTION


def test_text_match_is_case_insensitive():
    result = visible_recipes([_recipe("1", "Pasta Bake")], RecipeQuery(text="PASTA"))

    assert [recipe.title for recipe in result] == ["Pasta Bake"]


def test_text_matches_ingredients():
    result = visible_recipes(COLLECTION, RecipeQuery(text="beef"))

    assert [recipe.id for recipe in result] == ["1", "4"]


def test_cuisine_filter_scenario():
    collection = [
        _recipe("1", "Tacos", "mexican", "easy"),
        _recipe("2", "Ramen", "asian", "medium"),
    ]
    query = RecipeQuery.from_args({"q": "", "cuisine": "mexican", "difficulty": "all"})

    assert [recipe.title for recipe in visible_recipes(collection, query)] == ["Tacos"]


def test_filters_combine():
    query = RecipeQuery(text="beef", difficulty=Difficulty.MEDIUM)

    assert [recipe.id for recipe in visible_recipes(COLLECTION, query)] == ["4"]


def test_result_is_ordered_subsequence():
    queries = [
        RecipeQuery(),
        RecipeQuery(text="a"),
        RecipeQuery(cuisine=Cuisine.ASIAN),
        RecipeQuery(difficulty=Difficulty.MEDIUM),
        RecipeQuery(text="zzz"),
    ]
    for query in queries:
        result = visible_recipes(COLLECTION, query)
        positions = [COLLECTION.index(recipe) for recipe in result]
        assert positions == sorted(positions)


def test_visible_recipes_is_repeatable():
    query = RecipeQuery(text="e", cuisine=Cuisine.AMERICAN)

    first = visible_recipes(COLLECTION, query)
    second = visible_recipes(COLLECTION, query)

    assert first == second
    assert first is not second


def test_parse_choice_maps_sentinel_and_unknown_to_none():
    assert parse_choice("all", Cuisine) is None
    assert parse_choice("", Cuisine) is None
    assert parse_choice(None, Difficulty) is None
    assert parse_choice("klingon", Cuisine) is None
    assert parse_choice("indian", Cuisine) is Cuisine.INDIAN


def test_is_filtered():
    assert not RecipeQuery().is_filtered
    assert RecipeQuery(text="x").is_filtered
    assert RecipeQuery(cuisine=Cuisine.FRENCH).is_filtered
