"""Nutrition value object: the six tracked nutrient totals of a food, meal or day."""
import math
from dataclasses import dataclass, fields
from typing import Any, Dict

from leanmeal.utilities.constants import FAT_FLOOR


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Nutrition:
    calories: float = 0
    protein: float = 0  # grams
    fat: float = 0  # grams
    carbohydrates: float = 0  # grams
    fiber: float = 0  # grams
    sodium: float = 0  # mg

    def __add__(self, other: "Nutrition") -> "Nutrition":
        if not isinstance(other, Nutrition):
            return NotImplemented
        return Nutrition(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    def scaled(self, factor: float) -> "Nutrition":
        return Nutrition(**{f.name: getattr(self, f.name) * factor for f in fields(self)})

    def rounded(self) -> "Nutrition":
        return Nutrition(**{f.name: round_half_up(getattr(self, f.name)) for f in fields(self)})

    def protein_fat_ratio(self, fat_floor: float = FAT_FLOOR) -> float:
        return self.protein / max(self.fat, fat_floor)

    @staticmethod
    def total(items) -> "Nutrition":
        result = Nutrition()
        for item in items:
            result = result + item
        return result

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Nutrition":
        '''Creates a Nutrition value from a dictionary. Missing fields default to 0.'''
        d = data if isinstance(data, dict) else {}
        return Nutrition(**{f.name: d.get(f.name, 0) or 0 for f in fields(Nutrition)})

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
