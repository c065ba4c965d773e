from typing import Final

MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner", "snack")
FOOD_CATEGORIES: Final[tuple[str, ...]] = ("protein", "vegetable", "grain", "dairy", "fruit", "other")
NUTRITION_FIELDS: Final[tuple[str, ...]] = ("calories", "protein", "fat", "carbohydrates", "fiber", "sodium")

# Share of the daily calories given to each slot of a plan day
SLOT_CALORIE_SPLIT: Final[dict[str, float]] = {
    "breakfast": 0.25,
    "lunch": 0.35,
    "dinner": 0.35,
    "snack": 0.05,
}

PREP_TIME_MINUTES: Final[dict[str, int]] = {"breakfast": 15, "lunch": 25, "dinner": 35, "snack": 10}
DEFAULT_PREP_TIME: Final[int] = 20
DEFAULT_MEAL_CALORIES: Final[dict[str, int]] = {"breakfast": 350, "lunch": 450, "dinner": 500, "snack": 150}
DEFAULT_CALORIES: Final[int] = 400

# Meal composition heuristics
PROTEIN_CALORIE_SHARE: Final[float] = 0.4
VEGETABLE_CALORIE_ALLOWANCE: Final[int] = 50
MIN_GRAIN_CALORIES: Final[int] = 100
FRUIT_SERVING: Final[float] = 0.5
FRUIT_MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "snack")
FAT_FLOOR: Final[float] = 0.1

# Registered menus may run this much over the slot target when planning
MENU_CALORIE_TOLERANCE: Final[float] = 1.2
VEGETARIAN_TAGS: Final[tuple[str, ...]] = ("vegetarian", "vegan")
