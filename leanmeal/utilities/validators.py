"""
Input validation schemas for the tool surface, using Pydantic.

Field names are snake_case in Python and camelCase on the wire
(``mealType``, ``excludeIngredients`` ...); both spellings are accepted.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.domain.RegisteredMenu import MenuUpdate

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class ToolInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clean_strings(values):
    """Strip entries and drop the empty ones.

    Safe to run before type validation: anything that is not a list of
    strings is passed through untouched for pydantic to reject.
    """
    if not isinstance(values, list):
        return values
    return [v.strip() if isinstance(v, str) else v
            for v in values if not (isinstance(v, str) and not v.strip())]


def _clean_name(v):
    v = v.strip()
    if not v:
        raise ValueError('Menu name cannot be empty')
    return v


class SuggestMealInput(ToolInput):
    """Schema for suggest_meal."""
    meal_type: MealType = Field(..., description="Type of meal to suggest")
    calories: Optional[float] = Field(None, ge=100, le=1500, description="Target calories for the meal")
    exclude_ingredients: List[str] = Field(default_factory=list, description="Ingredients to exclude")
    vegetarian: bool = Field(False, description="Only vegetarian options")

    @field_validator('exclude_ingredients')
    @classmethod
    def clean_exclusions(cls, v):
        return _clean_strings(v)


class NutritionInfoInput(ToolInput):
    """Schema for get_nutrition_info."""
    food_item: str = Field(..., min_length=1, description="Name of the food item")

    @field_validator('food_item')
    @classmethod
    def strip_whitespace(cls, v):
        if not v.strip():
            raise ValueError('Food item cannot be empty')
        return v.strip()


class SearchFoodsInput(ToolInput):
    """Schema for search_foods."""
    query: str = Field(..., min_length=1, description="Substring of the food name")


class CreateMealPlanInput(ToolInput):
    """Schema for create_meal_plan."""
    days: int = Field(..., ge=1, le=14, description="Number of days for the meal plan")
    daily_calories: float = Field(..., ge=1200, le=3000, description="Target daily calories")
    vegetarian: bool = Field(False, description="Only vegetarian options")
    exclude_ingredients: List[str] = Field(default_factory=list, description="Ingredients to exclude")

    @field_validator('exclude_ingredients')
    @classmethod
    def clean_exclusions(cls, v):
        return _clean_strings(v)


class CreateMealPlanFromMenusInput(CreateMealPlanInput):
    """Schema for create_meal_plan_from_menus."""
    use_registered_menus: bool = Field(True, description="Prefer registered menus over generated meals")


class NutritionInput(ToolInput):
    """Schema for the nutrition block of a registered menu."""
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    carbohydrates: float = Field(..., ge=0)
    fiber: float = Field(..., ge=0)
    sodium: float = Field(..., ge=0)

    def to_domain(self) -> Nutrition:
        return Nutrition(self.calories, self.protein, self.fat, self.carbohydrates, self.fiber, self.sodium)


class RegisterMenuInput(ToolInput):
    """Schema for register_menu."""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(default_factory=list)
    meal_type: MealType
    nutrition: NutritionInput
    prep_time: int = Field(..., ge=1, description="Preparation time in minutes")
    servings: int = Field(..., ge=1)
    tags: List[str] = Field(default_factory=list)

    @field_validator('description')
    @classmethod
    def strip_text(cls, v):
        """Remove leading/trailing whitespace."""
        return v.strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)

    # before: blank entries must not count towards min_length
    @field_validator('ingredients', 'instructions', 'tags', mode='before')
    @classmethod
    def clean_lists(cls, v):
        return _clean_strings(v)


class UpdateMenuInput(ToolInput):
    """Schema for update_menu. Omitted (or null) fields keep their stored value."""
    id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    ingredients: Optional[List[str]] = Field(None, min_length=1)
    instructions: Optional[List[str]] = None
    meal_type: Optional[MealType] = None
    nutrition: Optional[NutritionInput] = None
    prep_time: Optional[int] = Field(None, ge=1)
    servings: Optional[int] = Field(None, ge=1)
    tags: Optional[List[str]] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return v if v is None else _clean_name(v)

    @field_validator('description')
    @classmethod
    def strip_text(cls, v):
        return v if v is None else v.strip()

    @field_validator('ingredients', 'instructions', 'tags', mode='before')
    @classmethod
    def clean_lists(cls, v):
        return _clean_strings(v)

    def to_update(self) -> MenuUpdate:
        return MenuUpdate(
            name=self.name,
            description=self.description,
            ingredients=self.ingredients,
            instructions=self.instructions,
            meal_type=self.meal_type,
            nutrition=self.nutrition.to_domain() if self.nutrition else None,
            prep_time=self.prep_time,
            servings=self.servings,
            tags=self.tags,
        )


class MenuIdInput(ToolInput):
    """Schema for get_menu and delete_menu."""
    id: str = Field(..., min_length=1)


class ListMenusInput(ToolInput):
    """Schema for list_menus."""
    meal_type: Optional[MealType] = None
    tag: Optional[str] = None
    search: Optional[str] = None


class SuggestFromMenusInput(ToolInput):
    """Schema for suggest_from_registered_menus."""
    meal_type: Optional[MealType] = None
    max_calories: Optional[float] = Field(None, ge=50)
    min_protein: Optional[float] = Field(None, ge=0)
    max_fat: Optional[float] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    vegetarian: bool = False
    limit: int = Field(5, ge=1, le=20)
