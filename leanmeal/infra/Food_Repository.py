"""Nutrition table: the fixed, read-only set of FoodItems keyed by lower-cased name."""
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, List, Optional, Union

from leanmeal.domain.FoodItem import FoodItem
from leanmeal.utilities.config import FOODS_FILE
from leanmeal.utilities.errors import FoodTableError

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.strip().lower() if isinstance(name, str) else ""


class NutritionTable:
    def __init__(self, foods: Iterable[FoodItem]):
        index = {}
        for food in foods:
            index[_key(food.name)] = food
        self._foods = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._foods)

    def __contains__(self, name) -> bool:
        return _key(name) in self._foods

    def lookup(self, name: str) -> Optional[FoodItem]:
        """Case-insensitive lookup; returns None when the food is unknown."""
        return self._foods.get(_key(name))

    def all_foods(self) -> List[FoodItem]:
        return list(self._foods.values())

    def filter(self, category: Optional[str] = None, vegetarian: Optional[bool] = None,
               predicate: Optional[Callable[[FoodItem], bool]] = None) -> List[FoodItem]:
        result = []
        for food in self._foods.values():
            if category is not None and food.category != category:
                continue
            if vegetarian is not None and food.is_vegetarian != vegetarian:
                continue
            if predicate is not None and not predicate(food):
                continue
            result.append(food)
        return result

    def by_category(self, category: str) -> List[FoodItem]:
        return self.filter(category=category)

    def vegetarian_foods(self) -> List[FoodItem]:
        return self.filter(vegetarian=True)

    def search(self, query: str) -> List[FoodItem]:
        q = _key(query)
        return [food for key, food in self._foods.items() if q in key]


def load_nutrition_table(path: Union[str, Path, None] = None) -> NutritionTable:
    """Read the food list from JSON. The table is required, so any failure is raised."""
    path = Path(path or FOODS_FILE)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            food_data = json.load(f)
        foods = [FoodItem.from_dict(entry) for entry in food_data]
    except FileNotFoundError as e:
        raise FoodTableError(f"Food table not found: {path}") from e
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise FoodTableError(f"Invalid food table {path}: {e}") from e
    table = NutritionTable(foods)
    logger.info(f"Loaded {len(table)} foods from {path}")
    return table
