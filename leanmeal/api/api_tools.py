"""Tool implementations: validated inputs in, structured text out.

Each tool takes its pydantic input model and returns the response text
(pretty-printed JSON or a plain message). Not-found cases are messages;
every other failure is raised as a LeanMealError and turned into a text
response by the handlers registered in ``api_run``.
"""
import json
import logging
import random
from threading import Lock
from typing import Any, Callable, Dict, NamedTuple, Optional, Type

from pydantic import BaseModel

from leanmeal.domain.RegisteredMenu import MenuCriteria
from leanmeal.infra.Food_Repository import NutritionTable, load_nutrition_table
from leanmeal.infra.Menu_Repository import MenuStore
from leanmeal.logic.composer.meal_composer import MealComposer
from leanmeal.logic.planning.plan_assembler import PlanAssembler
from leanmeal.utilities import config
from leanmeal.utilities.errors import MenuStoreUnavailableError
from leanmeal.utilities.validators import (
    CreateMealPlanFromMenusInput,
    CreateMealPlanInput,
    ListMenusInput,
    MenuIdInput,
    NutritionInfoInput,
    RegisterMenuInput,
    SearchFoodsInput,
    SuggestFromMenusInput,
    SuggestMealInput,
    UpdateMenuInput,
)

logger = logging.getLogger(__name__)


def as_text(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class ToolService:
    """Owns the nutrition table, the (optional) menu store and the planners for the process lifetime.

    FastAPI runs sync routes in a threadpool; ``lock`` makes each tool call run
    to completion before the next one starts, so the store and the shared
    random source are only ever touched by one call at a time.
    """

    def __init__(self, table: NutritionTable, store: Optional[MenuStore] = None,
                 rng: Optional[random.Random] = None):
        self.lock = Lock()
        self.table = table
        self.store = store
        self.composer = MealComposer(table, rng)
        self.planner = PlanAssembler(self.composer, store)

    @classmethod
    def from_config(cls) -> "ToolService":
        rng = random.Random(config.RANDOM_SEED) if config.RANDOM_SEED is not None else None
        return cls(load_nutrition_table(config.FOODS_FILE), MenuStore(config.MENUS_FILE), rng)

    def _require_store(self) -> MenuStore:
        if self.store is None:
            raise MenuStoreUnavailableError()
        return self.store

    # --- generated meals ---------------------------------------------------
    def suggest_meal(self, args: SuggestMealInput) -> str:
        meal = self.composer.compose(args.meal_type, args.calories, args.exclude_ingredients, args.vegetarian)
        return as_text(meal.to_dict())

    def get_nutrition_info(self, args: NutritionInfoInput) -> str:
        food = self.table.lookup(args.food_item)
        if food is None:
            return f"Nutrition information not found for: {args.food_item}"
        return as_text(food.to_dict())

    def search_foods(self, args: SearchFoodsInput) -> str:
        foods = self.table.search(args.query)
        return as_text({"count": len(foods), "foods": [f.to_dict() for f in foods]})

    def create_meal_plan(self, args: CreateMealPlanInput) -> str:
        plan = self.planner.build_plan(args.days, args.daily_calories, args.vegetarian, args.exclude_ingredients)
        return as_text(plan.to_dict())

    # --- registered menus --------------------------------------------------
    def register_menu(self, args: RegisterMenuInput) -> str:
        menu = self._require_store().register(
            name=args.name,
            description=args.description,
            ingredients=args.ingredients,
            instructions=args.instructions,
            meal_type=args.meal_type,
            nutrition=args.nutrition.to_domain(),
            prep_time=args.prep_time,
            servings=args.servings,
            tags=args.tags,
        )
        return as_text(menu.to_dict())

    def get_menu(self, args: MenuIdInput) -> str:
        menu = self._require_store().get(args.id)
        if menu is None:
            return f"Menu not found: {args.id}"
        return as_text(menu.to_dict())

    def list_menus(self, args: ListMenusInput) -> str:
        menus = self._require_store().list(meal_type=args.meal_type, tag=args.tag, search=args.search)
        return as_text({"count": len(menus), "menus": [m.to_dict() for m in menus]})

    def update_menu(self, args: UpdateMenuInput) -> str:
        menu = self._require_store().update(args.id, args.to_update())
        if menu is None:
            return f"Menu not found: {args.id}"
        return as_text(menu.to_dict())

    def delete_menu(self, args: MenuIdInput) -> str:
        if not self._require_store().delete(args.id):
            return f"Menu not found: {args.id}"
        return f"Menu {args.id} deleted successfully"

    def suggest_from_registered_menus(self, args: SuggestFromMenusInput) -> str:
        suggestions = self.planner.suggest_from_menus(MenuCriteria(
            meal_type=args.meal_type,
            max_calories=args.max_calories,
            min_protein=args.min_protein,
            max_fat=args.max_fat,
            tags=args.tags,
            vegetarian=args.vegetarian,
        ))
        shown = suggestions[:args.limit]
        return as_text({
            "totalAvailable": len(suggestions),
            "showing": len(shown),
            "suggestions": [m.to_dict() for m in shown],
        })

    def create_meal_plan_from_menus(self, args: CreateMealPlanFromMenusInput) -> str:
        plan = self.planner.build_plan_from_menus(args.days, args.daily_calories, args.vegetarian,
                                                  args.exclude_ingredients, args.use_registered_menus)
        return as_text(plan.to_dict())


class Tool(NamedTuple):
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[ToolService, Any], str]


TOOLS: Dict[str, Tool] = {t.name: t for t in [
    Tool("suggest_meal", "Suggest a low-fat, high-protein meal based on preferences and dietary requirements",
         SuggestMealInput, ToolService.suggest_meal),
    Tool("get_nutrition_info", "Get detailed nutritional information for a specific food item",
         NutritionInfoInput, ToolService.get_nutrition_info),
    Tool("search_foods", "Search the nutrition table by (partial) food name",
         SearchFoodsInput, ToolService.search_foods),
    Tool("create_meal_plan", "Create a multi-day low-fat, high-protein meal plan",
         CreateMealPlanInput, ToolService.create_meal_plan),
    Tool("register_menu", "Register a custom menu/recipe",
         RegisterMenuInput, ToolService.register_menu),
    Tool("get_menu", "Get a registered menu by id",
         MenuIdInput, ToolService.get_menu),
    Tool("list_menus", "List registered menus, optionally filtered by meal type, tag and search text",
         ListMenusInput, ToolService.list_menus),
    Tool("update_menu", "Update fields of a registered menu",
         UpdateMenuInput, ToolService.update_menu),
    Tool("delete_menu", "Delete a registered menu",
         MenuIdInput, ToolService.delete_menu),
    Tool("suggest_from_registered_menus", "Suggest registered menus ranked by protein-to-fat ratio",
         SuggestFromMenusInput, ToolService.suggest_from_registered_menus),
    Tool("create_meal_plan_from_menus", "Create a meal plan preferring registered menus, generating the rest",
         CreateMealPlanFromMenusInput, ToolService.create_meal_plan_from_menus),
]}


def call_tool(service: ToolService, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Validate ``arguments`` against the tool's schema and run it.

    Calls are serialised on ``service.lock``.
    Raises KeyError for an unknown tool and pydantic.ValidationError for bad input.
    """
    tool = TOOLS[name]
    args = tool.input_model.model_validate(arguments or {})
    with service.lock:
        logger.info(f"Calling tool {name}")
        return tool.handler(service, args)


def describe_tools():
    return [
        {
            "name": t.name,
            "description": t.description,
            "inputSchema": t.input_model.model_json_schema(by_alias=True),
        }
        for t in TOOLS.values()
    ]
