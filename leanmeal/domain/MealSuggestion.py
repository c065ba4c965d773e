"""MealSuggestion: a computed meal (generated or taken from a registered menu). Never persisted."""
from typing import Any, Dict, List, Optional

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.domain.RegisteredMenu import RegisteredMenu


class MealSuggestion:
    def __init__(self, name: str, description: str, ingredients: List[str], instructions: List[str],
                 total_nutrition: Nutrition, prep_time: int, servings: int, meal_type: str,
                 menu_id: Optional[str] = None):
        self.name = name
        self.description = description
        self.ingredients = ingredients[:]
        self.instructions = instructions[:]
        self.total_nutrition = total_nutrition
        self.prep_time = prep_time
        self.servings = servings
        self.meal_type = meal_type
        # Set when the meal was drawn from the menu store
        self.menu_id = menu_id

    def __str__(self) -> str:
        return f"{self.meal_type}: {self.name} - {self.total_nutrition.calories} kcal"

    __repr__ = __str__

    @staticmethod
    def from_menu(menu: RegisteredMenu) -> "MealSuggestion":
        """Direct field mapping, no scaling."""
        return MealSuggestion(
            name=menu.name,
            description=menu.description,
            ingredients=menu.ingredients,
            instructions=menu.instructions,
            total_nutrition=menu.nutrition,
            prep_time=menu.prep_time,
            servings=menu.servings,
            meal_type=menu.meal_type,
            menu_id=menu.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "name": self.name,
            "description": self.description,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "totalNutrition": self.total_nutrition.to_dict(),
            "prepTime": self.prep_time,
            "servings": self.servings,
            "mealType": self.meal_type,
        }
        if self.menu_id:
            d["menuId"] = self.menu_id
        return d
