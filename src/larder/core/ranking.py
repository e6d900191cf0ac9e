"""Suggestion ranking: filter, score and order the meal catalog for a slot."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Sequence, Union

from larder.core.interfaces import MealCatalogProvider, MealPlanHistoryProvider
from larder.core.models import (
    NEVER_PLANNED,
    Meal,
    MealSuggestion,
    MealTag,
    NoMatchingMeals,
    NoMealsExist,
    PlanningHistory,
    SuggestionContext,
    SuggestionFailure,
    SuggestionResult,
    SuggestionsFound,
)
from larder.core.scoring import SuggestionScorer, passes_filters, suggestion_sort_key

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 20
"""Upper bound on the number of suggestions returned for one slot."""

CatalogInput = Union[Sequence[Meal], MealCatalogProvider]
HistorySource = Union[Mapping[int, PlanningHistory], MealPlanHistoryProvider]


class SuggestionRanker:
    """
    Produces the ordered suggestion list for an empty planner slot.

    The outcome is one of SuggestionsFound, NoMealsExist, NoMatchingMeals or
    SuggestionFailure so callers can tell "create a meal" apart from "clear
    filters" and from a genuine failure.
    """

    def __init__(
        self,
        scorer: Optional[SuggestionScorer] = None,
        limit: int = MAX_SUGGESTIONS,
        max_workers: Optional[int] = None,
    ) -> None:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        self.scorer = scorer or SuggestionScorer()
        self.limit = limit
        self.max_workers = max_workers

    def rank(self, catalog: CatalogInput, context: SuggestionContext, history: HistorySource) -> SuggestionResult:
        """
        Rank the catalog for the context.

        Args:
            catalog: Meals, or a provider returning them
            context: Target slot, filters and search text
            history: Planning history per meal id, or a provider of it

        Returns:
            SuggestionResult variant

        Raises:
            ValueError: If catalog, context or history is None
        """
        if catalog is None or context is None or history is None:
            raise ValueError("catalog, context and history are required")

        try:
            meals = self._load_catalog(catalog)
            if not meals:
                return NoMealsExist()

            candidates = [meal for meal in meals if passes_filters(meal, context)]
            if not candidates:
                return NoMatchingMeals(tag_filter=context.tag_filter, search_query=context.search_query)

            suggestions = self._score_all(candidates, context, history)
        except Exception as exc:
            logger.exception(f"Failed to compute suggestions for {context.target_meal_type.value} on {context.target_date}")
            return SuggestionFailure(message=f"Failed to compute suggestions: {exc}", error=exc)

        suggestions.sort(key=suggestion_sort_key)
        return SuggestionsFound(suggestions=tuple(suggestions[: self.limit]))

    def _load_catalog(self, catalog: CatalogInput) -> list[Meal]:
        if isinstance(catalog, MealCatalogProvider):
            return list(catalog.get_all_meals())
        return list(catalog)

    def _score_all(
        self,
        meals: list[Meal],
        context: SuggestionContext,
        history: HistorySource,
    ) -> list[MealSuggestion]:
        def score_one(meal: Meal) -> MealSuggestion:
            return self.scorer.score(meal, context, _lookup_history(history, meal.id))

        if self.max_workers and self.max_workers > 1 and len(meals) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(pool.map(score_one, meals))
        return [score_one(meal) for meal in meals]


def _lookup_history(history: HistorySource, meal_id: int) -> PlanningHistory:
    if isinstance(history, MealPlanHistoryProvider):
        found = history.get_planning_history(meal_id)
    else:
        found = history.get(meal_id)
    return found or NEVER_PLANNED


def get_suggestions(catalog: CatalogInput, context: SuggestionContext, history: HistorySource) -> SuggestionResult:
    """Stable integration entrypoint using the packaged scoring weights."""
    return SuggestionRanker().rank(catalog, context, history)


def count_meals_by_tag(catalog: Iterable[Meal]) -> dict[MealTag, int]:
    """Number of meals carrying each tag, in tag declaration order; zero counts omitted."""
    counts = Counter(tag for meal in catalog for tag in meal.tags)
    return {tag: counts[tag] for tag in MealTag if counts[tag]}
