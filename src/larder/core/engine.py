"""Engine wiring: connects providers to the suggestion and shopping-list pipelines."""

from __future__ import annotations

from typing import Optional, Sequence

from larder.core.interfaces import (
    ExistingShoppingListProvider,
    MealCatalogProvider,
    MealPlanHistoryProvider,
)
from larder.core.models import MealPlan, SuggestionContext, SuggestionResult
from larder.core.ranking import SuggestionRanker
from larder.core.shopping import ShoppingListGenerator, ShoppingListResult


class PlannerEngine:
    """
    Runs both pipelines against injected providers.

    All collaborators are passed in, so each request works on its own
    snapshot and implementations can be swapped at runtime.
    """

    def __init__(
        self,
        catalog_provider: MealCatalogProvider,
        history_provider: MealPlanHistoryProvider,
        shopping_list_provider: Optional[ExistingShoppingListProvider] = None,
        ranker: Optional[SuggestionRanker] = None,
        generator: Optional[ShoppingListGenerator] = None,
    ) -> None:
        self.catalog_provider = catalog_provider
        self.history_provider = history_provider
        self.shopping_list_provider = shopping_list_provider
        self.ranker = ranker or SuggestionRanker()
        self.generator = generator or ShoppingListGenerator()

    def get_suggestions(self, context: SuggestionContext) -> SuggestionResult:
        return self.ranker.rank(self.catalog_provider, context, self.history_provider)

    def generate_shopping_list(self, plans: Sequence[MealPlan]) -> ShoppingListResult:
        """Generate the list for plans, resolving meals from the catalog snapshot."""
        meals_by_id = {meal.id: meal for meal in self.catalog_provider.get_all_meals()}
        existing = self.shopping_list_provider.get_current_items() if self.shopping_list_provider else ()
        return self.generator.generate(plans, meals_by_id, existing)
