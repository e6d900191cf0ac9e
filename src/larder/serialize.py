"""Conversion between models and plain dicts for the calling layer."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from dateutil import parser as date_parser

from larder.core.models import (
    Ingredient,
    Meal,
    MealPlan,
    MealTag,
    MealType,
    PlanningHistory,
    ShoppingListItem,
    SuggestionContext,
)


def to_dict(obj: Any) -> Any:
    """Convert models to JSON-ready values: ISO dates, enum values, sorted lists for sets."""
    if obj is None:
        return None
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, BaseException):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        data = {f.name: to_dict(getattr(obj, f.name)) for f in fields(obj)}
        status = getattr(obj, "status", None)
        if isinstance(status, Enum):
            data["status"] = status.value
        return data
    if isinstance(obj, (set, frozenset)):
        return sorted((to_dict(value) for value in obj), key=_sort_token)
    if isinstance(obj, (list, tuple)):
        return [to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {to_dict(key): to_dict(value) for key, value in obj.items()}
    return obj


def _sort_token(value: Any) -> tuple[int, Any]:
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))


def parse_ingredient(data: dict[str, Any]) -> Ingredient:
    return Ingredient(
        name=str(data.get("name", "")),
        quantity=str(data.get("quantity", "") or ""),
        unit=str(data.get("unit", "") or ""),
    )


def parse_meal(data: dict[str, Any]) -> Meal:
    return Meal(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        ingredients=tuple(parse_ingredient(i) for i in data.get("ingredients", []) or []),
        notes=str(data.get("notes", "") or ""),
        tags=frozenset(MealTag(t) for t in data.get("tags", []) or []),
    )


def parse_meal_plan(data: dict[str, Any]) -> MealPlan:
    plan_date = _parse_date(data.get("date"))
    if plan_date is None:
        raise ValueError(f"Meal plan {data.get('id')} has no valid date")
    return MealPlan(
        id=int(data.get("id", 0)),
        meal_id=int(data["meal_id"]),
        date=plan_date,
        meal_type=MealType(data.get("meal_type", MealType.DINNER.value)),
        servings=int(data.get("servings", 1)),
    )


def parse_shopping_list_item(data: dict[str, Any]) -> ShoppingListItem:
    return ShoppingListItem(
        ingredient_name=str(data.get("ingredient_name", "")),
        total_quantity=str(data.get("total_quantity", "") or ""),
        unit=str(data.get("unit", "") or ""),
        is_checked=bool(data.get("is_checked", False)),
        source_meal_ids=frozenset(int(i) for i in data.get("source_meal_ids", []) or []),
    )


def parse_planning_history(data: dict[str, Any]) -> PlanningHistory:
    plan_dates = tuple(d for d in (_parse_date(v) for v in data.get("plan_dates", []) or []) if d)
    return PlanningHistory(
        last_planned_date=_parse_date(data.get("last_planned_date")),
        plan_count=int(data.get("plan_count", 0)),
        plan_dates=plan_dates,
    )


def parse_suggestion_context(data: dict[str, Any]) -> SuggestionContext:
    target_date = _parse_date(data.get("target_date"))
    if target_date is None:
        raise ValueError("Suggestion context requires a target_date")
    return SuggestionContext(
        target_date=target_date,
        target_meal_type=MealType(data["target_meal_type"]),
        tag_filter=frozenset(MealTag(t) for t in data.get("tag_filter", []) or []),
        search_query=str(data.get("search_query", "") or ""),
        excluded_meal_ids=frozenset(int(i) for i in data.get("excluded_meal_ids", []) or []),
    )


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, TypeError):
        return None
