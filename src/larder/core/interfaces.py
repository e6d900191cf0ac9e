"""Protocol definitions for the read-only collaborators of the engine."""

from typing import Protocol, Sequence, runtime_checkable

from larder.core.models import Meal, PlanningHistory, ShoppingListItem


@runtime_checkable
class MealCatalogProvider(Protocol):
    """
    Supplies the meal library.

    Implementations typically wrap a repository; the engine only needs a
    read-only snapshot taken at call time.
    """

    def get_all_meals(self) -> Sequence[Meal]:
        """
        Return every meal in the library.

        Returns:
            Snapshot of Meal records; may be empty
        """
        ...


@runtime_checkable
class MealPlanHistoryProvider(Protocol):
    """Supplies planning history per meal for recency and frequency scoring."""

    def get_planning_history(self, meal_id: int) -> PlanningHistory:
        """
        Return the planning history for one meal.

        Args:
            meal_id: Meal.id to look up

        Returns:
            PlanningHistory; a never-planned meal has plan_count == 0 and no date
        """
        ...


@runtime_checkable
class ExistingShoppingListProvider(Protocol):
    """Supplies the current shopping list so checked state survives regeneration."""

    def get_current_items(self) -> Sequence[ShoppingListItem]:
        ...
