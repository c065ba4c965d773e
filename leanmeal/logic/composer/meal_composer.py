"""Greedy/random meal composition from the nutrition table.

One protein (best protein-to-fat ratio) carries 40% of the calorie target,
two random vegetables are added at 100 g and 50 g, a random grain fills the
remainder when it is worth more than 100 kcal, and breakfasts/snacks get a
half serving of fruit.
"""
import logging
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from leanmeal.domain.FoodItem import FoodItem
from leanmeal.domain.MealSuggestion import MealSuggestion
from leanmeal.infra.Food_Repository import NutritionTable
from leanmeal.logic.reporting.nutrition import scaled_total
from leanmeal.domain.Nutrition import round_half_up
from leanmeal.utilities.constants import (
    DEFAULT_CALORIES,
    DEFAULT_MEAL_CALORIES,
    DEFAULT_PREP_TIME,
    FRUIT_MEAL_TYPES,
    FRUIT_SERVING,
    MIN_GRAIN_CALORIES,
    PREP_TIME_MINUTES,
    PROTEIN_CALORIE_SHARE,
    VEGETABLE_CALORIE_ALLOWANCE,
)
from leanmeal.utilities.errors import NoEligibleFoodError

logger = logging.getLogger(__name__)


def default_calories(meal_type: str) -> int:
    return DEFAULT_MEAL_CALORIES.get(meal_type, DEFAULT_CALORIES)


def estimate_prep_time(meal_type: str) -> int:
    return PREP_TIME_MINUTES.get(meal_type, DEFAULT_PREP_TIME)


def _clean_exclusions(exclude_ingredients: Optional[Iterable[str]]) -> List[str]:
    return [e.strip().lower() for e in (exclude_ingredients or []) if e and e.strip()]


def _is_excluded(name: str, exclusions: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(excluded in lowered for excluded in exclusions)


def _portion(food: FoodItem, multiplier: float) -> str:
    return f"{round_half_up(multiplier * 100)}g {food.name}"


class MealComposer:
    def __init__(self, table: NutritionTable, rng: Optional[random.Random] = None):
        self.table = table
        self.rng = rng or random.Random()

    def candidate_pool(self, exclude_ingredients: Optional[Iterable[str]] = None,
                       vegetarian: bool = False) -> List[FoodItem]:
        foods = self.table.vegetarian_foods() if vegetarian else self.table.all_foods()
        exclusions = _clean_exclusions(exclude_ingredients)
        return [food for food in foods if not _is_excluded(food.name, exclusions)]

    @staticmethod
    def select_best_protein(proteins: Sequence[FoodItem]) -> Optional[FoodItem]:
        """Highest protein-to-fat ratio wins; ties keep table order."""
        if not proteins:
            return None
        return max(proteins, key=lambda food: food.protein_fat_ratio())

    def compose(self, meal_type: str, target_calories: Optional[float] = None,
                exclude_ingredients: Optional[Iterable[str]] = None,
                vegetarian: bool = False) -> MealSuggestion:
        if not target_calories:
            target_calories = default_calories(meal_type)
        pool = self.candidate_pool(exclude_ingredients, vegetarian)

        proteins = [f for f in pool if f.category == 'protein']
        vegetables = [f for f in pool if f.category == 'vegetable']
        grains = [f for f in pool if f.category == 'grain']
        fruits = [f for f in pool if f.category == 'fruit']

        protein = self.select_best_protein(proteins)
        if protein is None:
            raise NoEligibleFoodError('protein', meal_type)
        if len(vegetables) < 2:
            raise NoEligibleFoodError('vegetable', meal_type, needed=2)

        protein_calories = target_calories * PROTEIN_CALORIE_SHARE
        portions: List[Tuple[FoodItem, float]] = [(protein, protein_calories / protein.calories)]

        vegetable1, vegetable2 = self.rng.sample(vegetables, 2)
        portions.append((vegetable1, 1.0))
        portions.append((vegetable2, 0.5))

        grain = None
        remaining_calories = target_calories - (protein_calories + VEGETABLE_CALORIE_ALLOWANCE)
        if remaining_calories > MIN_GRAIN_CALORIES and grains:
            grain = self.rng.choice(grains)
            portions.append((grain, remaining_calories / grain.calories))

        fruit = None
        if meal_type in FRUIT_MEAL_TYPES and fruits:
            fruit = self.rng.choice(fruits)
            portions.append((fruit, FRUIT_SERVING))

        logger.debug(f"Composed {meal_type} ({target_calories} kcal) from "
                     f"{[food.name for food, _ in portions]}")
        return MealSuggestion(
            name=self.meal_name(protein, vegetable1, grain),
            description=f"Low-fat, high-protein {meal_type} optimized for muscle building and weight management",
            ingredients=[_portion(food, multiplier) for food, multiplier in portions],
            instructions=self.cooking_instructions(protein, grain, fruit),
            total_nutrition=scaled_total(portions),
            prep_time=estimate_prep_time(meal_type),
            servings=1,
            meal_type=meal_type,
        )

    @staticmethod
    def meal_name(protein: FoodItem, vegetable: FoodItem, grain: Optional[FoodItem]) -> str:
        if grain:
            return f"{protein.display_name()} with {vegetable.display_name()} and {grain.display_name()}"
        return f"{protein.display_name()} with {vegetable.display_name()}"

    @staticmethod
    def cooking_instructions(protein: FoodItem, grain: Optional[FoodItem],
                             fruit: Optional[FoodItem]) -> List[str]:
        steps = ["Wash and prepare all vegetables"]

        if grain:
            if 'rice' in grain.name or 'quinoa' in grain.name:
                steps.append(f"Cook {grain.name} according to package directions")
            elif 'oatmeal' in grain.name:
                steps.append("Prepare oatmeal with water or low-fat milk")

        if 'chicken' in protein.name:
            steps.append("Season chicken breast and grill or bake at 375°F for 20-25 minutes")
        elif 'fish' in protein.name or 'salmon' in protein.name:
            steps.append("Season fish and bake at 400°F for 12-15 minutes or until flaky")
        elif 'egg' in protein.name:
            steps.append("Whisk egg whites and cook in non-stick pan over medium heat")
        elif 'tofu' in protein.name:
            steps.append("Press tofu, cube, and pan-fry until golden")
        else:
            steps.append(f"Prepare {protein.name} according to preference")

        steps.append("Steam or lightly sauté vegetables until tender-crisp")

        if grain:
            steps.append(f"Serve {protein.name} over {grain.name} with vegetables on the side")
        else:
            steps.append(f"Plate {protein.name} with vegetables")

        if fruit:
            steps.append(f"Add fresh {fruit.name} as garnish or side")

        steps.append("Season with herbs and spices to taste (avoid high-sodium seasonings)")
        return steps
