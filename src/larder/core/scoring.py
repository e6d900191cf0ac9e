"""Suggestion scoring: relevance of one meal for one planner slot."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Optional, Union

from larder.core.config import ScoringWeights, load_scoring_weights
from larder.core.models import (
    NEVER_PLANNED,
    Meal,
    MealSuggestion,
    MealTag,
    PlanningHistory,
    SuggestionContext,
)

HistoryInput = Union[PlanningHistory, Mapping[int, PlanningHistory], None]

_TAG_ORDER = {tag: index for index, tag in enumerate(MealTag)}


def normalize_query(query: str) -> str:
    return " ".join((query or "").split()).casefold()


def passes_tag_filter(meal: Meal, context: SuggestionContext) -> bool:
    """A non-empty tag filter keeps meals carrying at least one of its tags."""
    if not context.tag_filter:
        return True
    return bool(meal.tags & context.tag_filter)


def matches_search(meal: Meal, context: SuggestionContext) -> bool:
    """Case-insensitive substring match of the query against name or notes."""
    query = normalize_query(context.search_query)
    if not query:
        return True
    return query in normalize_query(meal.name) or query in normalize_query(meal.notes)


def passes_filters(meal: Meal, context: SuggestionContext) -> bool:
    if meal.id in context.excluded_meal_ids:
        return False
    return passes_tag_filter(meal, context) and matches_search(meal, context)


def suggestion_sort_key(suggestion: MealSuggestion) -> tuple[float, str, int]:
    """Score descending, then name (case-insensitive), then id."""
    return (-suggestion.score, suggestion.meal.name.casefold(), suggestion.meal.id)


class SuggestionScorer:
    """
    Additive, explainable scoring of a meal against a SuggestionContext.

    Factors, from highest to lowest impact:
    1. meal-type fit (the meal carries the slot's tag)
    2. each tag of the active filter the meal carries
    3. variety: bonus for meals not planned lately, penalties for meals
       planned within the recency window or planned often
    4. a search-text match

    Every factor that adds to the score contributes one reason, in the order
    above. Scoring does not exclude meals; hard filters are applied by the
    ranker through passes_filters().
    """

    def __init__(self, weights: Optional[ScoringWeights] = None) -> None:
        self.weights = weights or load_scoring_weights()

    def score(self, meal: Meal, context: SuggestionContext, history: HistoryInput = None) -> MealSuggestion:
        planning = self._resolve_history(meal, history)
        w = self.weights
        total = w.base_score
        reasons: list[str] = []

        if context.target_meal_type.matching_tag in meal.tags:
            total += w.meal_type_bonus
            reasons.append(f"Perfect for {context.target_meal_type.value}")

        matched_tags = sorted(meal.tags & context.tag_filter, key=_TAG_ORDER.__getitem__)
        if matched_tags:
            total += w.tag_match_bonus * len(matched_tags)
            reasons.append("Matches your filters: " + ", ".join(tag.display_name for tag in matched_tags))

        variety_delta, variety_reason = self._variety(planning, context)
        total += variety_delta
        if variety_reason:
            reasons.append(variety_reason)

        query = normalize_query(context.search_query)
        if query and matches_search(meal, context):
            total += w.search_bonus
            reasons.append(f'Matches "{context.search_query.strip()}"')

        if not math.isfinite(total):
            raise ValueError(f"Non-finite score for meal {meal.id}")

        return MealSuggestion(
            meal=meal,
            score=max(0.0, total),
            reasons=tuple(reasons),
            last_planned_date=planning.last_planned_date,
            plan_count=planning.plan_count,
        )

    def _variety(self, planning: PlanningHistory, context: SuggestionContext) -> tuple[float, str | None]:
        w = self.weights
        delta = -w.frequency_penalty(planning.plan_count)

        if planning.last_planned_date is None:
            if planning.plan_count == 0:
                return delta + w.variety_bonus, "Haven't tried this in a while"
            return delta, None

        days_since = (context.target_date - planning.last_planned_date).days
        if days_since < w.recency_window_days:
            return delta - w.recency_penalty, None
        if days_since >= w.long_absence_days:
            return delta + w.variety_bonus, "Haven't had this in over a month"
        if days_since >= w.variety_window_days:
            return delta + w.variety_bonus, "Good variety choice"
        return delta, None

    def _resolve_history(self, meal: Meal, history: HistoryInput) -> PlanningHistory:
        if history is None:
            return NEVER_PLANNED
        if isinstance(history, PlanningHistory):
            return history
        return history.get(meal.id) or NEVER_PLANNED
