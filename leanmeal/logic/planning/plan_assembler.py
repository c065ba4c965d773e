"""Multi-day meal plans built from the composer, optionally drawing on registered menus."""
import logging
import random
from typing import Dict, Iterable, List, Optional, Set

from leanmeal.domain.MealPlan import DailyMealPlan, MealPlan
from leanmeal.domain.MealSuggestion import MealSuggestion
from leanmeal.domain.Nutrition import round_half_up
from leanmeal.domain.RegisteredMenu import MenuCriteria, RegisteredMenu
from leanmeal.infra.Menu_Repository import MenuStore
from leanmeal.logic.composer.meal_composer import MealComposer
from leanmeal.logic.reporting.nutrition import meals_total, plan_summary
from leanmeal.utilities.constants import MENU_CALORIE_TOLERANCE, SLOT_CALORIE_SPLIT
from leanmeal.utilities.errors import MenuStoreUnavailableError

logger = logging.getLogger(__name__)


def slot_calories(daily_calories: float) -> Dict[str, int]:
    """Calorie target of each slot; every slot is rounded on its own."""
    return {slot: round_half_up(daily_calories * share) for slot, share in SLOT_CALORIE_SPLIT.items()}


class PlanAssembler:
    def __init__(self, composer: MealComposer, store: Optional[MenuStore] = None,
                 rng: Optional[random.Random] = None):
        self.composer = composer
        self.store = store
        # Share the composer's source so a single seed pins the whole plan
        self.rng = rng or composer.rng

    def build_plan(self, days: int, daily_calories: float, vegetarian: bool = False,
                   exclude_ingredients: Optional[Iterable[str]] = None) -> MealPlan:
        exclusions = list(exclude_ingredients or [])

        def compose(slot, calories, used):
            return self.composer.compose(slot, calories, exclusions, vegetarian)

        return self._assemble(days, daily_calories, compose)

    def build_plan_from_menus(self, days: int, daily_calories: float, vegetarian: bool = False,
                              exclude_ingredients: Optional[Iterable[str]] = None,
                              use_registered_menus: bool = True) -> MealPlan:
        if not use_registered_menus or self.store is None:
            return self.build_plan(days, daily_calories, vegetarian, exclude_ingredients)
        exclusions = list(exclude_ingredients or [])

        def pick(slot, calories, used):
            return self._menu_or_generated(slot, calories, exclusions, vegetarian, used)

        return self._assemble(days, daily_calories, pick)

    def suggest_from_menus(self, criteria: MenuCriteria) -> List[RegisteredMenu]:
        if self.store is None:
            raise MenuStoreUnavailableError()
        return self.store.suggest(criteria)

    def _assemble(self, days: int, daily_calories: float, choose) -> MealPlan:
        targets = slot_calories(daily_calories)
        daily_plans = []
        for day in range(1, days + 1):
            used_menu_ids: Set[str] = set()
            meals = {slot: choose(slot, calories, used_menu_ids) for slot, calories in targets.items()}
            daily_plans.append(DailyMealPlan(
                day=day,
                breakfast=meals['breakfast'],
                lunch=meals['lunch'],
                dinner=meals['dinner'],
                snack=meals['snack'],
                total_nutrition=meals_total(meals.values()),
            ))
        summary = plan_summary([d.total_nutrition for d in daily_plans])
        logger.info(f"Built {days}-day plan at {daily_calories} kcal/day "
                    f"(avg {summary['avgDailyCalories']} kcal)")
        return MealPlan(daily_plans, summary)

    def _menu_or_generated(self, meal_type: str, target_calories: int, exclusions: List[str],
                           vegetarian: bool, used_menu_ids: Set[str]) -> MealSuggestion:
        candidates = self.store.suggest(MenuCriteria(
            meal_type=meal_type,
            max_calories=round_half_up(target_calories * MENU_CALORIE_TOLERANCE),
            vegetarian=vegetarian,
            exclude_ids=used_menu_ids,
        ))
        wanted = [e for e in exclusions if e and e.strip()]
        candidates = [m for m in candidates if not any(m.has_ingredient_like(e.strip()) for e in wanted)]
        if candidates:
            menu = self.rng.choice(candidates)
            used_menu_ids.add(menu.id)
            return MealSuggestion.from_menu(menu)
        logger.debug(f"No registered {meal_type} menu fits {target_calories} kcal; generating one")
        return self.composer.compose(meal_type, target_calories, exclusions, vegetarian)
