"""MealPlan domain entity: per-day meal slots plus the averaged summary."""
from typing import Any, Dict, List

from leanmeal.domain.MealSuggestion import MealSuggestion
from leanmeal.domain.Nutrition import Nutrition


class DailyMealPlan:
    def __init__(self, day: int, breakfast: MealSuggestion, lunch: MealSuggestion,
                 dinner: MealSuggestion, snack: MealSuggestion, total_nutrition: Nutrition):
        self.day = day
        self.breakfast = breakfast
        self.lunch = lunch
        self.dinner = dinner
        self.snack = snack
        self.total_nutrition = total_nutrition

    def meals(self) -> List[MealSuggestion]:
        return [self.breakfast, self.lunch, self.dinner, self.snack]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "breakfast": self.breakfast.to_dict(),
            "lunch": self.lunch.to_dict(),
            "dinner": self.dinner.to_dict(),
            "snack": self.snack.to_dict(),
            "totalNutrition": self.total_nutrition.to_dict(),
        }


class MealPlan:
    def __init__(self, days: List[DailyMealPlan], summary: Dict[str, int]):
        self.days = days
        self.summary = summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": [d.to_dict() for d in self.days],
            "summary": dict(self.summary),
        }
