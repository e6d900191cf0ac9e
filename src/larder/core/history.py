"""Planning history derived from past meal plans."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Mapping

from larder.core.models import NEVER_PLANNED, MealPlan, PlanningHistory

HISTORY_WINDOW_DAYS = 30


def build_planning_history(
    plans: Iterable[MealPlan],
    today: date,
    window_days: int = HISTORY_WINDOW_DAYS,
) -> dict[int, PlanningHistory]:
    """
    Summarize recent plans per meal.

    Args:
        plans: Meal plans to analyze
        today: Reference date; plans in [today - window_days, today] count
        window_days: Size of the trailing window

    Returns:
        Mapping of meal id to PlanningHistory. Meals without plans in the
        window are absent.
    """
    window_start = today - timedelta(days=window_days)
    dates_by_meal: dict[int, list[date]] = defaultdict(list)
    for plan in plans:
        if window_start <= plan.date <= today:
            dates_by_meal[plan.meal_id].append(plan.date)

    history: dict[int, PlanningHistory] = {}
    for meal_id, dates in dates_by_meal.items():
        ordered = tuple(sorted(dates))
        history[meal_id] = PlanningHistory(
            last_planned_date=ordered[-1],
            plan_count=len(ordered),
            plan_dates=ordered,
        )
    return history


def week_bounds(target_date: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing target_date."""
    monday = target_date - timedelta(days=target_date.weekday())
    return monday, monday + timedelta(days=6)


def meals_planned_in_week(plans: Iterable[MealPlan], target_date: date) -> frozenset[int]:
    """Meal ids already planned in the week of target_date."""
    monday, sunday = week_bounds(target_date)
    return frozenset(plan.meal_id for plan in plans if monday <= plan.date <= sunday)


class InMemoryHistoryProvider:
    """MealPlanHistoryProvider backed by a precomputed mapping."""

    def __init__(self, history: Mapping[int, PlanningHistory] | None = None) -> None:
        self._history = dict(history or {})

    @classmethod
    def from_plans(
        cls,
        plans: Iterable[MealPlan],
        today: date,
        window_days: int = HISTORY_WINDOW_DAYS,
    ) -> "InMemoryHistoryProvider":
        return cls(build_planning_history(plans, today, window_days))

    def get_planning_history(self, meal_id: int) -> PlanningHistory:
        return self._history.get(meal_id, NEVER_PLANNED)
