import random

import pytest

from leanmeal.domain.FoodItem import FoodItem
from leanmeal.domain.Nutrition import Nutrition, round_half_up
from leanmeal.infra.Food_Repository import NutritionTable
from leanmeal.logic.composer.meal_composer import MealComposer, default_calories, estimate_prep_time
from leanmeal.utilities.errors import MealCompositionError, NoEligibleFoodError


@pytest.fixture
def composer(table):
    return MealComposer(table, random.Random(1234))


def _food_name(ingredient):
    return ingredient.split(" ", 1)[1]


def _expected_total(table, meal, target):
    """Recompute the meal's nutrition from its ingredient names and the fixed serving rules."""
    names = [_food_name(i) for i in meal.ingredients]
    protein = table.lookup(names[0])
    protein_calories = target * 0.4
    portions = [(protein, protein_calories / protein.calories),
                (table.lookup(names[1]), 1.0),
                (table.lookup(names[2]), 0.5)]
    for name in names[3:]:
        food = table.lookup(name)
        if food.category == "grain":
            portions.append((food, (target - (protein_calories + 50)) / food.calories))
        else:
            portions.append((food, 0.5))
    raw = Nutrition()
    for food, multiplier in portions:
        raw = raw + food.nutrition.scaled(multiplier)
    return {field: round_half_up(value) for field, value in raw.to_dict().items()}


@pytest.mark.parametrize("meal_type,target", [
    ("breakfast", 350), ("lunch", 600), ("dinner", 800), ("snack", 150), ("snack", 120),
])
def test_totals_are_the_rounded_sum(table, composer, meal_type, target):
    meal = composer.compose(meal_type, target)
    assert meal.total_nutrition.to_dict() == _expected_total(table, meal, target)


def test_best_protein_is_deterministic(composer):
    # egg whites: 11g protein / 0.2g fat is the best ratio in the table
    for _ in range(5):
        assert composer.compose("lunch", 450).ingredients[0].endswith(" egg whites")


def test_protein_gets_forty_percent_of_calories(composer):
    meal = composer.compose("dinner", 520)
    # 208 kcal / 52 kcal per 100g -> 400g
    assert meal.ingredients[0] == "400g egg whites"


def test_vegetables_are_distinct_and_portioned(table, composer):
    for _ in range(20):
        meal = composer.compose("lunch", 450)
        first, second = meal.ingredients[1], meal.ingredients[2]
        assert first.startswith("100g ") and second.startswith("50g ")
        assert _food_name(first) != _food_name(second)
        assert table.lookup(_food_name(first)).category == "vegetable"


def test_grain_only_when_remainder_exceeds_100_kcal(table, composer):
    # 250 - (100 + 50) = 100 -> no grain
    small = composer.compose("lunch", 250)
    assert len(small.ingredients) == 3
    assert " and " not in small.name
    # 450 - (180 + 50) = 220 -> grain scaled to the remainder
    big = composer.compose("lunch", 450)
    grain = table.lookup(_food_name(big.ingredients[3]))
    assert grain.category == "grain"
    assert big.ingredients[3] == f"{round_half_up(220 / grain.calories * 100)}g {grain.name}"
    assert big.name.endswith(f" and {grain.display_name()}")


def test_fruit_only_for_breakfast_and_snack(table, composer):
    for meal_type in ("breakfast", "snack"):
        meal = composer.compose(meal_type, 150)
        fruit = table.lookup(_food_name(meal.ingredients[-1]))
        assert fruit.category == "fruit"
        assert meal.ingredients[-1] == f"50g {fruit.name}"
        assert f"Add fresh {fruit.name} as garnish or side" in meal.instructions
    for meal_type in ("lunch", "dinner"):
        meal = composer.compose(meal_type, 450)
        assert all(table.lookup(_food_name(i)).category != "fruit" for i in meal.ingredients)


def test_defaults_by_meal_type(composer):
    meal = composer.compose("breakfast")
    assert meal.prep_time == 15
    assert meal.servings == 1
    assert meal.meal_type == "breakfast"
    assert meal.description == ("Low-fat, high-protein breakfast optimized for muscle building "
                                "and weight management")
    # default 350 kcal -> 140 kcal of egg whites
    assert meal.ingredients[0] == "269g egg whites"
    assert [default_calories(t) for t in ("breakfast", "lunch", "dinner", "snack", "brunch")] == \
        [350, 450, 500, 150, 400]
    assert [estimate_prep_time(t) for t in ("breakfast", "lunch", "dinner", "snack", "brunch")] == \
        [15, 25, 35, 10, 20]


def test_exclusions_are_case_insensitive_substrings(table, composer):
    meal = composer.compose("dinner", 600, exclude_ingredients=["EGG", "Fish"])
    names = [_food_name(i) for i in meal.ingredients]
    assert not any("egg" in n or "fish" in n for n in names)
    # lentils (9 / 0.4) beat the remaining proteins once egg whites and white fish are gone
    assert names[0] == "lentils"
    assert "Prepare lentils according to preference" in meal.instructions


def test_blank_exclusions_are_ignored(composer):
    meal = composer.compose("lunch", 450, exclude_ingredients=["", "   "])
    assert meal.ingredients[0].endswith("egg whites")


def test_vegetarian_pool(table, composer):
    for _ in range(10):
        meal = composer.compose("lunch", 500, exclude_ingredients=["egg"], vegetarian=True)
        assert all(table.lookup(_food_name(i)).is_vegetarian for i in meal.ingredients)


@pytest.mark.parametrize("exclusions,protein,instruction", [
    ([], "egg whites", "Whisk egg whites and cook in non-stick pan over medium heat"),
    (["egg", "lentil"], "white fish", "Season fish and bake at 400°F for 12-15 minutes or until flaky"),
    (["egg", "lentil", "fish", "chickpea", "salmon"], "chicken breast",
     "Season chicken breast and grill or bake at 375°F for 20-25 minutes"),
    (["egg", "lentil", "fish", "chickpea", "salmon", "chicken", "tempeh"], "tofu",
     "Press tofu, cube, and pan-fry until golden"),
])
def test_instructions_follow_the_protein(composer, exclusions, protein, instruction):
    meal = composer.compose("dinner", 500, exclude_ingredients=exclusions)
    assert meal.ingredients[0].endswith(" " + protein)
    assert meal.instructions[0] == "Wash and prepare all vegetables"
    assert instruction in meal.instructions
    assert "Steam or lightly sauté vegetables until tender-crisp" in meal.instructions
    assert meal.instructions[-1] == "Season with herbs and spices to taste (avoid high-sodium seasonings)"


def test_no_protein_left_is_an_explicit_error(composer):
    with pytest.raises(NoEligibleFoodError) as exc:
        composer.compose("lunch", 450, exclude_ingredients=["egg", "tofu", "tempeh", "lentil", "chickpea"],
                         vegetarian=True)
    assert exc.value.category == "protein"
    assert isinstance(exc.value, MealCompositionError)


def test_fewer_than_two_vegetables_is_an_explicit_error(composer):
    with pytest.raises(NoEligibleFoodError) as exc:
        composer.compose("lunch", 450, exclude_ingredients=["broccoli", "spinach", "pepper", "asparagus",
                                                            "cucumber", "zucchini"])
    assert exc.value.category == "vegetable"
    assert exc.value.needed == 2


def test_seeded_sources_give_identical_meals(table):
    a = MealComposer(table, random.Random(99)).compose("breakfast", 400)
    b = MealComposer(table, random.Random(99)).compose("breakfast", 400)
    assert a.to_dict() == b.to_dict()


def test_meal_name_with_small_table():
    foods = [
        FoodItem("seitan", 120, 25, 2, 4, 1, 300, "100g", True, "protein"),
        FoodItem("kale", 49, 4.3, 0.9, 9, 3.6, 38, "100g", True, "vegetable"),
        FoodItem("leek", 61, 1.5, 0.3, 14, 1.8, 20, "100g", True, "vegetable"),
        FoodItem("barley", 123, 2.3, 0.4, 28, 3.8, 3, "100g cooked", True, "grain"),
    ]
    meal = MealComposer(NutritionTable(foods), random.Random(0)).compose("dinner", 500)
    assert meal.name in ("Seitan with Kale and Barley", "Seitan with Leek and Barley")
    assert meal.ingredients[0] == "167g seitan"
    assert "Serve seitan over barley with vegetables on the side" in meal.instructions
