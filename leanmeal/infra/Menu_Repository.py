"""Registered menu store: user recipes kept in memory and mirrored to a JSON file.

The whole collection is rewritten on every mutation through a temp file in the
same directory followed by ``os.replace``, so readers never see a half-written
store. A failed write raises MenuPersistenceError *after* the in-memory change
has been applied.
"""
import json
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union
from uuid import uuid4

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.domain.RegisteredMenu import MenuCriteria, MenuUpdate, RegisteredMenu
from leanmeal.utilities.config import MENUS_FILE
from leanmeal.utilities.errors import MenuPersistenceError

logger = logging.getLogger(__name__)


class MenuStore:
    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or MENUS_FILE)
        self._menus: Dict[str, RegisteredMenu] = {}
        self._issued_ids = set()
        self._load()

    # --- persistence -------------------------------------------------------
    def _load(self):
        if not self.path.exists():
            logger.info(f"Menu store not found at {self.path}; creating an empty one.")
            try:
                self._save()
            except MenuPersistenceError as e:
                logger.error(f"Could not initialise menu store: {e}")
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                menu_data = json.load(f) or []
            for entry in menu_data:
                menu = RegisteredMenu.from_dict(entry)
                self._menus[menu.id] = menu
                self._issued_ids.add(menu.id)
            logger.info(f"Loaded {len(self._menus)} registered menus from {self.path}")
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid menu store {self.path}: {e}. Starting with an empty store.")
            self._menus = {}
            self._set_aside()

    def _set_aside(self):
        """Keep an unreadable store file as ``<name>.corrupt`` so the next save cannot overwrite it."""
        backup = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, backup)
            logger.warning(f"Moved unreadable menu store to {backup}")
        except OSError as e:
            logger.error(f"Could not move unreadable menu store {self.path} aside: {e}")

    def _save(self):
        payload = [menu.to_dict() for menu in self._menus.values()]
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".menus_", suffix=".json")
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving menus to {self.path}: {e}")
            raise MenuPersistenceError(f"Failed to save menus to {self.path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- helpers -----------------------------------------------------------
    def _generate_id(self) -> str:
        menu_id = f"menu_{uuid4().hex}"
        while menu_id in self._issued_ids:
            menu_id = f"menu_{uuid4().hex}"
        self._issued_ids.add(menu_id)
        return menu_id

    @staticmethod
    def _now_after(previous: datetime) -> datetime:
        now = datetime.now(timezone.utc)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    # --- mutations ---------------------------------------------------------
    def register(self, name: str, description: str, ingredients: List[str], instructions: List[str],
                 meal_type: str, nutrition: Nutrition, prep_time: int, servings: int,
                 tags: Optional[List[str]] = None) -> RegisteredMenu:
        now = datetime.now(timezone.utc)
        menu = RegisteredMenu(
            id=self._generate_id(),
            name=name,
            description=description,
            ingredients=ingredients,
            instructions=instructions,
            meal_type=meal_type,
            nutrition=nutrition,
            prep_time=prep_time,
            servings=servings,
            tags=tags or [],
            created_at=now,
            updated_at=now,
        )
        self._menus[menu.id] = menu
        logger.info(f"Registered menu {menu.id} ({menu.name})")
        self._save()
        return menu

    def update(self, menu_id: str, changes: MenuUpdate) -> Optional[RegisteredMenu]:
        menu = self._menus.get(menu_id)
        if menu is None:
            return None
        for field, value in changes.supplied().items():
            if isinstance(value, list):
                value = value[:]
            if field == 'tags':
                value = list(dict.fromkeys(value))
            setattr(menu, field, value)
        menu.updated_at = self._now_after(menu.updated_at)
        logger.info(f"Updated menu {menu_id}: {sorted(changes.supplied()) or 'timestamp only'}")
        self._save()
        return menu

    def delete(self, menu_id: str) -> bool:
        if self._menus.pop(menu_id, None) is None:
            return False
        logger.info(f"Deleted menu {menu_id}")
        self._save()
        return True

    # --- queries -----------------------------------------------------------
    def get(self, menu_id: str) -> Optional[RegisteredMenu]:
        return self._menus.get(menu_id)

    def all(self) -> List[RegisteredMenu]:
        return list(self._menus.values())

    def count(self) -> int:
        return len(self._menus)

    def list(self, meal_type: Optional[str] = None, tag: Optional[str] = None,
             search: Optional[str] = None) -> List[RegisteredMenu]:
        """Return menus matching every supplied filter (mealType, exact tag, free-text search)."""
        menus = self.all()
        if meal_type:
            menus = [m for m in menus if m.meal_type == meal_type]
        if tag:
            menus = [m for m in menus if tag in m.tags]
        if search:
            menus = [m for m in menus if m.matches_text(search)]
        return menus

    def suggest(self, criteria: Optional[MenuCriteria] = None) -> List[RegisteredMenu]:
        """Menus accepted by every criterion, best protein-to-fat ratio first."""
        criteria = criteria or MenuCriteria()
        candidates = [m for m in self._menus.values() if criteria.accepts(m)]
        return sorted(candidates, key=lambda m: m.nutrition.protein_fat_ratio(), reverse=True)

    def by_nutrition_range(self, min_protein: Optional[float] = None, max_fat: Optional[float] = None,
                           max_calories: Optional[float] = None) -> List[RegisteredMenu]:
        criteria = MenuCriteria(min_protein=min_protein, max_fat=max_fat, max_calories=max_calories)
        return [m for m in self._menus.values() if criteria.accepts(m)]
