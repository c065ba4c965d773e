import json
from datetime import datetime, timezone

import pytest

from leanmeal.domain.Nutrition import Nutrition
from leanmeal.domain.RegisteredMenu import MenuCriteria, MenuUpdate
from leanmeal.infra.Menu_Repository import MenuStore
from leanmeal.utilities.errors import MenuPersistenceError


def _snapshot(menu):
    d = menu.to_dict()
    d.pop("updatedAt")
    return d


def test_missing_store_is_created_empty(menus_file):
    assert not menus_file.exists()
    store = MenuStore(menus_file)
    assert store.count() == 0
    assert json.loads(menus_file.read_text(encoding="utf-8")) == []


def test_register_assigns_id_and_timestamps(store, register, menus_file):
    menu = register()
    assert menu.id.startswith("menu_")
    assert menu.created_at == menu.updated_at
    assert store.get(menu.id) is menu
    stored = json.loads(menus_file.read_text(encoding="utf-8"))
    assert [m["id"] for m in stored] == [menu.id]
    assert stored[0]["mealType"] == "breakfast"


def test_ids_are_unique(register):
    ids = {register(name=f"Menu {i}").id for i in range(20)}
    assert len(ids) == 20


def test_store_round_trips_through_file(register, menus_file):
    menu = register(tags=["vegetarian", "quick"])
    reloaded = MenuStore(menus_file).get(menu.id)
    assert reloaded == menu
    assert reloaded.created_at == menu.created_at
    assert reloaded.nutrition == Nutrition(300, 25, 5, 30, 4, 100)


def test_corrupt_store_starts_empty(menus_file):
    menus_file.parent.mkdir(parents=True)
    menus_file.write_text("{not json", encoding="utf-8")
    store = MenuStore(menus_file)
    assert store.count() == 0
    backup = menus_file.with_name("menus.json.corrupt")
    assert backup.read_text(encoding="utf-8") == "{not json"

    store.register("Eggs", "", ["3 eggs"], [], "breakfast", Nutrition(200, 18, 14, 1, 0, 180), 5, 1)
    assert backup.read_text(encoding="utf-8") == "{not json"
    assert len(json.loads(menus_file.read_text(encoding="utf-8"))) == 1


def test_offset_less_timestamps_load_as_utc_and_update(menus_file):
    menus_file.parent.mkdir(parents=True)
    menus_file.write_text(json.dumps([{
        "id": "menu_1", "name": "Old Oats", "mealType": "breakfast", "ingredients": ["oats"],
        "nutrition": {"calories": 300, "protein": 25, "fat": 5}, "prepTime": 10, "servings": 1,
        "createdAt": "2024-01-01T00:00:00", "updatedAt": "2024-01-01T00:00:00",
    }]), encoding="utf-8")
    store = MenuStore(menus_file)
    menu = store.get("menu_1")
    assert menu.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    updated = store.update("menu_1", MenuUpdate(name="New Oats"))
    assert updated.name == "New Oats"
    assert updated.updated_at > updated.created_at
    assert MenuStore(menus_file).get("menu_1").to_dict()["createdAt"] == "2024-01-01T00:00:00.000000+00:00"


def test_empty_update_only_refreshes_updated_at(store, register):
    menu = register()
    before = _snapshot(menu)
    previous_updated = menu.updated_at
    updated = store.update(menu.id, MenuUpdate())
    assert _snapshot(updated) == before
    assert updated.updated_at > previous_updated


def test_repeated_updates_strictly_increase_updated_at(store, register):
    menu = register()
    stamps = [store.update(menu.id, MenuUpdate()).updated_at for _ in range(5)]
    assert all(a < b for a, b in zip(stamps, stamps[1:]))


def test_partial_update_keeps_omitted_fields(store, register, menus_file):
    menu = register()
    updated = store.update(menu.id, MenuUpdate(name="Overnight Oats", prep_time=5))
    assert updated.id == menu.id
    assert updated.name == "Overnight Oats"
    assert updated.prep_time == 5
    assert updated.description == "Oats with whey and berries"
    assert updated.tags == ["vegetarian"]
    assert updated.created_at == menu.created_at
    assert MenuStore(menus_file).get(menu.id).name == "Overnight Oats"


def test_explicit_empty_values_are_applied(store, register):
    menu = register()
    updated = store.update(menu.id, MenuUpdate(tags=[], description=""))
    assert updated.tags == []
    assert updated.description == ""


def test_update_unknown_id(store):
    assert store.update("menu_missing", MenuUpdate(name="x")) is None


def test_delete(store, register, menus_file):
    menu = register()
    assert store.delete(menu.id) is True
    assert store.get(menu.id) is None
    assert json.loads(menus_file.read_text(encoding="utf-8")) == []


def test_delete_missing_does_not_write(store, monkeypatch):
    calls = []
    monkeypatch.setattr(store, "_save", lambda: calls.append(1))
    assert store.delete("menu_missing") is False
    assert calls == []


def test_write_failure_keeps_in_memory_change(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be", encoding="utf-8")
    store = MenuStore(blocker / "menus.json")
    with pytest.raises(MenuPersistenceError):
        store.register("Eggs", "", ["3 eggs"], [], "breakfast", Nutrition(200, 18, 14, 1, 0, 180), 5, 1)
    assert store.count() == 1


def test_list_filters_are_conjunctive(store, register):
    oats = register()
    register(name="Chicken Salad", description="Grilled chicken on greens", meal_type="lunch",
             tags=["high-protein"], ingredients=["150g chicken breast", "lettuce"])
    register(name="Tofu Bowl", description="Crispy tofu over rice", meal_type="lunch", tags=["vegan"],
             ingredients=["200g tofu", "rice"])

    assert len(store.list()) == 3
    assert [m.name for m in store.list(meal_type="lunch")] == ["Chicken Salad", "Tofu Bowl"]
    assert [m.name for m in store.list(meal_type="lunch", tag="vegan")] == ["Tofu Bowl"]
    assert store.list(meal_type="breakfast", tag="vegan") == []
    assert [m.id for m in store.list(search="WHEY")] == [oats.id]
    assert [m.name for m in store.list(meal_type="lunch", search="chicken")] == ["Chicken Salad"]
    # description and ingredients are searched too
    assert [m.name for m in store.list(search="greens")] == ["Chicken Salad"]
    assert [m.name for m in store.list(search="rice")] == ["Tofu Bowl"]


def test_suggest_orders_by_protein_fat_ratio(store, register):
    register(name="Ratio 5", nutrition=Nutrition(300, 25, 5, 30, 4, 100))
    register(name="Zero fat", nutrition=Nutrition(100, 6, 0, 10, 0, 50))  # floored: 6 / 0.1 = 60
    register(name="Ratio 30", nutrition=Nutrition(200, 30, 1, 5, 0, 60))
    names = [m.name for m in store.suggest()]
    assert names == ["Zero fat", "Ratio 30", "Ratio 5"]


def test_suggest_applies_every_criterion(store, register):
    keep = register(name="Keep", tags=["vegetarian", "quick"])
    excluded = register(name="Excluded by id", tags=["vegetarian", "quick"])
    register(name="Too fatty", tags=["vegetarian", "quick"], nutrition=Nutrition(300, 25, 20, 10, 0, 0))
    register(name="Not vegetarian", tags=["quick"])
    register(name="Wrong meal", meal_type="dinner", tags=["vegetarian", "quick"])
    register(name="Too big", tags=["vegetarian", "quick"], nutrition=Nutrition(900, 60, 5, 10, 0, 0))
    register(name="Other tag", tags=["vegan"])

    result = store.suggest(MenuCriteria(meal_type="breakfast", max_calories=500, min_protein=20, max_fat=10,
                                        tags=["quick"], exclude_ids=[excluded.id], vegetarian=True))
    assert [m.id for m in result] == [keep.id]


def test_suggest_protein_oats_scenario(store, register):
    oats = register()
    assert oats in store.suggest(MenuCriteria(vegetarian=True, max_fat=10))
    assert oats not in store.suggest(MenuCriteria(vegetarian=True, max_fat=2))


def test_vegan_tag_counts_as_vegetarian(store, register):
    bowl = register(tags=["vegan"])
    assert store.suggest(MenuCriteria(vegetarian=True)) == [bowl]


def test_by_nutrition_range(store, register):
    register(name="Lean", nutrition=Nutrition(250, 30, 3, 10, 2, 80))
    register(name="Rich", nutrition=Nutrition(700, 20, 35, 50, 2, 80))
    assert [m.name for m in store.by_nutrition_range(min_protein=25)] == ["Lean"]
    assert [m.name for m in store.by_nutrition_range(max_fat=40, max_calories=800)] == ["Lean", "Rich"]
