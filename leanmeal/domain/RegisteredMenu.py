"""RegisteredMenu domain entity: a user-authored recipe kept in the menu store.

Also holds the two value objects used to talk to the store:
``MenuUpdate`` (partial update, ``None`` meaning "field omitted") and
``MenuCriteria`` (conjunctive suggestion filters).
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.utilities.constants import VEGETARIAN_TAGS


def _parse_timestamp(value) -> datetime:
    if isinstance(value, str) and value:
        # Older stores were written with a trailing 'Z'
        value = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if not isinstance(value, datetime):
        return datetime.now(timezone.utc)
    # Offset-less stamps are taken as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class RegisteredMenu:
    def __init__(self, id: str, name: str = "", description: str = "",
                 ingredients: Optional[List[str]] = None, instructions: Optional[List[str]] = None,
                 meal_type: str = "", nutrition: Optional[Nutrition] = None, prep_time: int = 1,
                 servings: int = 1, tags: Optional[List[str]] = None,
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.id = id
        self.name = name
        self.description = description
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions[:] if instructions else []
        self.meal_type = meal_type
        self.nutrition = nutrition or Nutrition()
        self.prep_time = prep_time
        self.servings = servings
        # Tags keep their registration order but behave as a set
        self.tags = list(dict.fromkeys(tags or []))
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        n = self.nutrition
        return (f"{self.name} [{self.meal_type}] ({self.id}) - {n.calories} kcal, "
                f"P {n.protein}g / F {n.fat}g - Tags: {', '.join(self.tags)}")

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        return isinstance(other, RegisteredMenu) and self.to_dict() == other.to_dict()

    def is_vegetarian(self) -> bool:
        return any(tag in self.tags for tag in VEGETARIAN_TAGS)

    def has_ingredient_like(self, fragment: str) -> bool:
        fragment = fragment.lower()
        return any(fragment in ingredient.lower() for ingredient in self.ingredients)

    def matches_text(self, query: str) -> bool:
        """Case-insensitive match against name, description, ingredients and tags."""
        q = query.lower()
        return (q in self.name.lower()
                or q in self.description.lower()
                or any(q in ing.lower() for ing in self.ingredients)
                or any(q in tag.lower() for tag in self.tags))

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "RegisteredMenu":
        '''Creates a RegisteredMenu from its stored (camelCase) dictionary form.'''
        d = dict(data)
        return RegisteredMenu(
            id=d['id'],
            name=d.get('name', ''),
            description=d.get('description', ''),
            ingredients=list(d.get('ingredients') or []),
            instructions=list(d.get('instructions') or []),
            meal_type=d.get('mealType', d.get('meal_type', '')),
            nutrition=Nutrition.from_dict(d.get('nutrition') or {}),
            prep_time=d.get('prepTime', d.get('prep_time', 1)),
            servings=d.get('servings', 1),
            tags=list(d.get('tags') or []),
            created_at=_parse_timestamp(d.get('createdAt')),
            updated_at=_parse_timestamp(d.get('updatedAt')),
        )

    def to_dict(self) -> Dict[str, Any]:
        '''Converts the menu to a dictionary for JSON persistence and tool responses.'''
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "mealType": self.meal_type,
            "nutrition": self.nutrition.to_dict(),
            "prepTime": self.prep_time,
            "servings": self.servings,
            "tags": self.tags,
            "createdAt": self.created_at.isoformat(timespec="microseconds"),
            "updatedAt": self.updated_at.isoformat(timespec="microseconds"),
        }


class MenuUpdate:
    """Fields to overwrite on a registered menu. ``None`` leaves the stored value alone."""

    FIELDS = ("name", "description", "ingredients", "instructions", "meal_type",
              "nutrition", "prep_time", "servings", "tags")

    def __init__(self, name: Optional[str] = None, description: Optional[str] = None,
                 ingredients: Optional[List[str]] = None, instructions: Optional[List[str]] = None,
                 meal_type: Optional[str] = None, nutrition: Optional[Nutrition] = None,
                 prep_time: Optional[int] = None, servings: Optional[int] = None,
                 tags: Optional[List[str]] = None):
        self.name = name
        self.description = description
        self.ingredients = ingredients
        self.instructions = instructions
        self.meal_type = meal_type
        self.nutrition = nutrition
        self.prep_time = prep_time
        self.servings = servings
        self.tags = tags

    def supplied(self) -> Dict[str, Any]:
        return {f: getattr(self, f) for f in self.FIELDS if getattr(self, f) is not None}


class MenuCriteria:
    """Conjunctive filters for MenuStore.suggest; every ``None`` criterion is skipped."""

    def __init__(self, meal_type: Optional[str] = None, max_calories: Optional[float] = None,
                 min_protein: Optional[float] = None, max_fat: Optional[float] = None,
                 tags: Optional[Iterable[str]] = None, exclude_ids: Optional[Iterable[str]] = None,
                 vegetarian: bool = False):
        self.meal_type = meal_type
        self.max_calories = max_calories
        self.min_protein = min_protein
        self.max_fat = max_fat
        self.tags: List[str] = list(tags or [])
        self.exclude_ids: Set[str] = set(exclude_ids or [])
        self.vegetarian = vegetarian

    def accepts(self, menu: RegisteredMenu) -> bool:
        n = menu.nutrition
        if self.meal_type is not None and menu.meal_type != self.meal_type:
            return False
        if self.max_calories is not None and n.calories > self.max_calories:
            return False
        if self.min_protein is not None and n.protein < self.min_protein:
            return False
        if self.max_fat is not None and n.fat > self.max_fat:
            return False
        if self.tags and not any(tag in menu.tags for tag in self.tags):
            return False
        if menu.id in self.exclude_ids:
            return False
        if self.vegetarian and not menu.is_vegetarian():
            return False
        return True
