"""Exception hierarchy shared by the nutrition table, menu store and planners."""


class LeanMealError(Exception):
    """Base class for every error raised by leanmeal."""


class FoodTableError(LeanMealError):
    """The bundled nutrition table could not be loaded."""


class MealCompositionError(LeanMealError):
    """A meal could not be composed from the filtered food pool."""


class NoEligibleFoodError(MealCompositionError):
    def __init__(self, category: str, meal_type: str, needed: int = 1):
        self.category = category
        self.meal_type = meal_type
        self.needed = needed
        plural = "item" if needed == 1 else "items"
        super().__init__(
            f"No eligible {category} for {meal_type}: need at least {needed} {category} {plural} "
            f"after applying the vegetarian and exclusion filters"
        )


class MenuStoreError(LeanMealError):
    """Base class for registered-menu store failures."""


class MenuPersistenceError(MenuStoreError):
    """Writing the menu store to disk failed; the in-memory change is kept."""


class MenuStoreUnavailableError(MenuStoreError):
    def __init__(self):
        super().__init__("Menu database not available")
