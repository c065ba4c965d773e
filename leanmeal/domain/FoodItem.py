"""FoodItem domain entity: per-serving nutrition facts of one entry of the nutrition table."""
from dataclasses import dataclass
from typing import Any, Dict

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.utilities.constants import FOOD_CATEGORIES


@dataclass(frozen=True)
class FoodItem:
    name: str
    calories: float
    protein: float
    fat: float
    carbohydrates: float
    fiber: float
    sodium: float
    serving_size: str
    is_vegetarian: bool
    category: str

    def __post_init__(self):
        if self.category not in FOOD_CATEGORIES:
            raise ValueError(f"Unknown food category '{self.category}' for {self.name}")

    @property
    def nutrition(self) -> Nutrition:
        return Nutrition(self.calories, self.protein, self.fat, self.carbohydrates, self.fiber, self.sodium)

    def protein_fat_ratio(self) -> float:
        return self.nutrition.protein_fat_ratio()

    def display_name(self) -> str:
        """Name with the first letter capitalised, the rest untouched."""
        return self.name[:1].upper() + self.name[1:]

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "FoodItem":
        d = dict(data)
        # Accept the camelCase wire names as well
        if 'servingSize' in d:
            d.setdefault('serving_size', d.pop('servingSize'))
        if 'isVegetarian' in d:
            d.setdefault('is_vegetarian', d.pop('isVegetarian'))
        return FoodItem(
            name=str(d['name']),
            calories=d.get('calories', 0),
            protein=d.get('protein', 0),
            fat=d.get('fat', 0),
            carbohydrates=d.get('carbohydrates', 0),
            fiber=d.get('fiber', 0),
            sodium=d.get('sodium', 0),
            serving_size=d.get('serving_size', ''),
            is_vegetarian=bool(d.get('is_vegetarian', False)),
            category=d.get('category', 'other'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbohydrates": self.carbohydrates,
            "fiber": self.fiber,
            "sodium": self.sodium,
            "servingSize": self.serving_size,
            "isVegetarian": self.is_vegetarian,
            "category": self.category,
        }
