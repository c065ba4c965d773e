import random

import pytest
from fastapi.testclient import TestClient

from leanmeal.api.api_run import create_app
from leanmeal.api.api_tools import ToolService
from leanmeal.domain.Nutrition import Nutrition
from leanmeal.infra.Food_Repository import load_nutrition_table
from leanmeal.infra.Menu_Repository import MenuStore


@pytest.fixture(scope="session")
def table():
    return load_nutrition_table()


@pytest.fixture
def menus_file(tmp_path):
    # Use a temporary file for menus.json (don't alter the real one)
    return tmp_path / "data" / "menus.json"


@pytest.fixture
def store(menus_file):
    return MenuStore(menus_file)


@pytest.fixture
def service(table, store):
    return ToolService(table, store, random.Random(42))


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


@pytest.fixture
def register(store):
    """Register a menu with sensible defaults; keyword arguments override them."""
    def _register(**overrides):
        fields = dict(
            name="Protein Oats",
            description="Oats with whey and berries",
            ingredients=["60g oats", "30g whey protein", "50g blueberries"],
            instructions=["Cook oats", "Stir in whey", "Top with berries"],
            meal_type="breakfast",
            nutrition=Nutrition(calories=300, protein=25, fat=5, carbohydrates=30, fiber=4, sodium=100),
            prep_time=10,
            servings=1,
            tags=["vegetarian"],
        )
        fields.update(overrides)
        return store.register(**fields)
    return _register
