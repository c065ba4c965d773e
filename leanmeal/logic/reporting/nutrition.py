"""Nutrition aggregation for generated meals and meal plans.

Totals are summed at full precision and rounded once at the end
(round-the-sum, never sum-the-rounds).
"""
from typing import Dict, Iterable, List, Sequence, Tuple

from leanmeal.domain.FoodItem import FoodItem
from leanmeal.domain.MealSuggestion import MealSuggestion
from leanmeal.domain.Nutrition import Nutrition, round_half_up


def scaled_total(portions: Iterable[Tuple[FoodItem, float]]) -> Nutrition:
    """Sum of each food's per-serving nutrition times its serving multiplier, rounded per field."""
    return Nutrition.total(food.nutrition.scaled(multiplier) for food, multiplier in portions).rounded()


def meals_total(meals: Iterable[MealSuggestion]) -> Nutrition:
    return Nutrition.total(meal.total_nutrition for meal in meals)


def plan_summary(daily_totals: Sequence[Nutrition]) -> Dict[str, int]:
    """Rounded per-day averages; an empty plan averages to zero."""
    total_days = len(daily_totals)
    totals = Nutrition.total(daily_totals)
    divisor = total_days or 1
    return {
        'totalDays': total_days,
        'avgDailyCalories': round_half_up(totals.calories / divisor),
        'avgDailyProtein': round_half_up(totals.protein / divisor),
        'avgDailyFat': round_half_up(totals.fat / divisor),
        'avgDailyCarbs': round_half_up(totals.carbohydrates / divisor),
    }


__all__: List[str] = ["scaled_total", "meals_total", "plan_summary"]
