"""Tests for shopping-list generation."""

from datetime import date

import pytest

from larder.core.models import Ingredient, Meal, MealPlan, MealType, ShoppingListItem
from larder.core.shopping import (
    ShoppingListGenerator,
    generate_shopping_list,
    ingredient_sources,
    summarize,
)
from larder.errors import ShoppingListGenerationError


def _make_meal(meal_id: int, name: str, *ingredients: tuple[str, str, str]) -> Meal:
    return Meal(id=meal_id, name=name, ingredients=tuple(Ingredient(*i) for i in ingredients))


def _make_plan(plan_id: int, meal_id: int, day: int = 15, servings: int = 1) -> MealPlan:
    return MealPlan(
        id=plan_id,
        meal_id=meal_id,
        date=date(2024, 1, day),
        meal_type=MealType.DINNER,
        servings=servings,
    )


@pytest.fixture()
def meals() -> dict[int, Meal]:
    catalog = [
        _make_meal(1, "Pasta", ("Pasta", "400", "g"), ("Milk", "0.5", "L")),
        _make_meal(2, "Pasta Again", ("Pasta", "200", "g")),
        _make_meal(3, "Pancakes", ("Milk", "0.25", "L"), ("Egg", "2", "pcs")),
    ]
    return {meal.id: meal for meal in catalog}


def test_pasta_quantities_are_summed(meals: dict[int, Meal]) -> None:
    items = generate_shopping_list([_make_plan(10, 1), _make_plan(11, 2)], meals, [])
    pasta = next(item for item in items if item.ingredient_name == "Pasta")
    assert pasta.total_quantity == "600"
    assert pasta.unit == "g"
    assert pasta.source_meal_ids == frozenset({1, 2})


def test_empty_plans_is_not_an_error(meals: dict[int, Meal]) -> None:
    result = ShoppingListGenerator().generate([], meals, [])
    assert result.items == []
    assert result.skipped_plan_ids == ()


def test_missing_meal_is_skipped(meals: dict[int, Meal]) -> None:
    generator = ShoppingListGenerator()
    plans = [_make_plan(10, 1), _make_plan(11, 3)]
    with_gap = generator.generate(plans + [_make_plan(12, 99)], meals, [])
    without_gap = generator.generate(plans, meals, [])
    assert with_gap.items == without_gap.items
    assert with_gap.skipped_plan_ids == (12,)


def test_checked_state_is_preserved(meals: dict[int, Meal]) -> None:
    existing = [
        ShoppingListItem(ingredient_name="Milk", total_quantity="0.5", unit="L", is_checked=True,
                         source_meal_ids=frozenset({1})),
        ShoppingListItem(ingredient_name="Pasta", total_quantity="400", unit="g", is_checked=False,
                         source_meal_ids=frozenset({1})),
    ]
    items = generate_shopping_list([_make_plan(10, 1), _make_plan(11, 3)], meals, existing)
    by_name = {item.ingredient_name: item for item in items}
    assert by_name["Milk"].is_checked is True
    assert by_name["Milk"].total_quantity == "0.75"
    assert by_name["Pasta"].is_checked is False
    assert by_name["Egg"].is_checked is False


def test_checked_state_matches_normalized_name_and_exact_unit(meals: dict[int, Meal]) -> None:
    existing = [
        ShoppingListItem(ingredient_name=" milk", total_quantity="1", unit="L", is_checked=True),
        ShoppingListItem(ingredient_name="Egg", total_quantity="2", unit="PCS", is_checked=True),
    ]
    items = generate_shopping_list([_make_plan(10, 3)], meals, existing)
    by_name = {item.ingredient_name: item for item in items}
    assert by_name["Milk"].is_checked is True
    assert by_name["Egg"].is_checked is False


def test_stale_existing_items_are_dropped(meals: dict[int, Meal]) -> None:
    existing = [
        ShoppingListItem(ingredient_name="Bread", total_quantity="1", unit="loaf", is_checked=True,
                         source_meal_ids=frozenset({5})),
        ShoppingListItem(ingredient_name="Napkins", total_quantity="1", unit="pack"),
    ]
    items = generate_shopping_list([_make_plan(10, 2)], meals, existing)
    assert [item.ingredient_name for item in items] == ["Pasta"]


def test_servings_do_not_scale_quantities(meals: dict[int, Meal]) -> None:
    items = generate_shopping_list([_make_plan(10, 2, servings=4)], meals, [])
    assert items[0].total_quantity == "200"


def test_same_meal_planned_twice_contributes_twice(meals: dict[int, Meal]) -> None:
    items = generate_shopping_list([_make_plan(10, 2, day=15), _make_plan(11, 2, day=16)], meals, [])
    assert items[0].total_quantity == "400"
    assert items[0].source_meal_ids == frozenset({2})


def test_date_range_filters_plans(meals: dict[int, Meal]) -> None:
    plans = [_make_plan(10, 1, day=14), _make_plan(11, 2, day=15), _make_plan(12, 3, day=20)]
    result = ShoppingListGenerator().generate(plans, meals, [], start=date(2024, 1, 15), end=date(2024, 1, 19))
    assert [(i.ingredient_name, i.total_quantity) for i in result.items] == [("Pasta", "200")]


def test_diagnostics_are_reported() -> None:
    meals = {
        1: _make_meal(1, "Soup", ("Salt", "1", "tsp")),
        2: _make_meal(2, "Stew", ("Salt", "to taste", "tsp")),
    }
    result = ShoppingListGenerator().generate([_make_plan(10, 1), _make_plan(11, 2)], meals, [])
    assert result.items[0].total_quantity == "1"
    assert [d.reason for d in result.diagnostics] == ["dropped_unparseable"]


def test_malformed_meal_raises_generation_error() -> None:
    meals = {1: Meal(id=1, name="Broken", ingredients=None)}  # type: ignore[arg-type]
    with pytest.raises(ShoppingListGenerationError):
        ShoppingListGenerator().generate([_make_plan(10, 1)], meals, [])


def test_none_plans_is_rejected(meals: dict[int, Meal]) -> None:
    with pytest.raises(ValueError):
        ShoppingListGenerator().generate(None, meals, [])  # type: ignore[arg-type]


def test_summarize_counts_checked_items() -> None:
    items = [
        ShoppingListItem(ingredient_name="Milk", total_quantity="1", unit="L", is_checked=True),
        ShoppingListItem(ingredient_name="Egg", total_quantity="2", unit="pcs"),
    ]
    summary = summarize(items)
    assert summary.total_items == 2
    assert summary.checked_items == 1
    assert summary.unchecked_items == 1


def test_ingredient_sources(meals: dict[int, Meal]) -> None:
    sources = ingredient_sources("milk", [3, 1, 2, 42], meals)
    assert [(s.meal_id, s.meal_name, s.quantity, s.unit) for s in sources] == [
        (1, "Pasta", "0.5", "L"),
        (3, "Pancakes", "0.25", "L"),
    ]


def test_out_of_range_quantity_does_not_escape_generator() -> None:
    meals = {
        1: _make_meal(1, "Brine", ("Salt", "1", "g")),
        2: _make_meal(2, "Cure", ("Salt", "9e999999", "g")),
    }
    result = ShoppingListGenerator().generate([_make_plan(10, 1), _make_plan(11, 2)], meals, [])
    assert result.items[0].total_quantity == "1"
    assert [d.reason for d in result.diagnostics] == ["dropped_unparseable"]
