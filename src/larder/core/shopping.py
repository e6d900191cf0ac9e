"""Shopping-list generation from meal plans."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from larder.core.aggregate import IngredientAggregator
from larder.core.models import (
    Ingredient,
    Meal,
    MealPlan,
    QuantityDiagnostic,
    ShoppingListItem,
    normalize_name,
)
from larder.errors import ShoppingListGenerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShoppingListResult:
    items: list[ShoppingListItem]
    skipped_plan_ids: tuple[int, ...] = ()
    """Plans whose meal no longer exists."""

    diagnostics: tuple[QuantityDiagnostic, ...] = ()


@dataclass(frozen=True)
class ShoppingListSummary:
    total_items: int
    checked_items: int

    @property
    def unchecked_items(self) -> int:
        return self.total_items - self.checked_items


@dataclass(frozen=True)
class IngredientSource:
    """One meal's contribution to a shopping-list ingredient."""

    meal_id: int
    meal_name: str
    quantity: str
    unit: str


class ShoppingListGenerator:
    """
    Builds the ingredient-derived part of the shopping list.

    Plans are resolved against the meal library, their ingredients are
    aggregated, and the checked state of matching items from the previous
    list is carried over. Regeneration fully replaces the generated items;
    manually added items are the caller's responsibility.

    Servings are not used to scale quantities: each resolved plan contributes
    its meal's ingredient list once.
    """

    def __init__(self, aggregator: Optional[IngredientAggregator] = None) -> None:
        self.aggregator = aggregator or IngredientAggregator()

    def generate(
        self,
        plans: Sequence[MealPlan],
        meals_by_id: Mapping[int, Meal],
        existing_items: Sequence[ShoppingListItem] = (),
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ShoppingListResult:
        """
        Generate shopping-list items for the given plans.

        Args:
            plans: Meal plans to shop for
            meals_by_id: Meal library keyed by Meal.id
            existing_items: Current list, used only to carry over is_checked
            start: Optional first date (inclusive) of plans to include
            end: Optional last date (inclusive) of plans to include

        Returns:
            ShoppingListResult; empty items when nothing is planned

        Raises:
            ValueError: If plans or meals_by_id is None
            ShoppingListGenerationError: If a plan or meal is malformed
        """
        if plans is None or meals_by_id is None:
            raise ValueError("plans and meals_by_id are required")
        if not plans:
            return ShoppingListResult(items=[])

        try:
            pairs, skipped = self._collect(plans, meals_by_id, start, end)
            aggregated = self.aggregator.aggregate_with_diagnostics(pairs)
            items = self._carry_over_checked(aggregated.items, existing_items or ())
        except (AttributeError, TypeError, KeyError, ArithmeticError) as exc:
            logger.error(f"Shopping list generation failed: {exc}")
            raise ShoppingListGenerationError(f"Failed to generate shopping list: {exc}") from exc

        logger.debug(
            f"Generated {len(items)} shopping list items from {len(plans) - len(skipped)} plans "
            f"({len(skipped)} skipped)"
        )
        return ShoppingListResult(
            items=items,
            skipped_plan_ids=tuple(skipped),
            diagnostics=tuple(aggregated.diagnostics),
        )

    def _collect(
        self,
        plans: Iterable[MealPlan],
        meals_by_id: Mapping[int, Meal],
        start: Optional[date],
        end: Optional[date],
    ) -> tuple[list[tuple[Ingredient, int]], list[int]]:
        pairs: list[tuple[Ingredient, int]] = []
        skipped: list[int] = []
        for plan in plans:
            if start and plan.date < start:
                continue
            if end and plan.date > end:
                continue
            meal = meals_by_id.get(plan.meal_id)
            if meal is None:
                logger.debug(f"Skipping plan {plan.id}: meal {plan.meal_id} not found")
                skipped.append(plan.id)
                continue
            pairs.extend((ingredient, meal.id) for ingredient in meal.ingredients)
        return pairs, skipped

    def _carry_over_checked(
        self,
        items: list[ShoppingListItem],
        existing_items: Iterable[ShoppingListItem],
    ) -> list[ShoppingListItem]:
        checked_keys = {item.key for item in existing_items if item.is_checked}
        if not checked_keys:
            return items
        return [replace(item, is_checked=True) if item.key in checked_keys else item for item in items]


def generate_shopping_list(
    plans: Sequence[MealPlan],
    meals_by_id: Mapping[int, Meal],
    existing_items: Sequence[ShoppingListItem] = (),
) -> list[ShoppingListItem]:
    """Stable integration entrypoint: generated items only."""
    return ShoppingListGenerator().generate(plans, meals_by_id, existing_items).items


def summarize(items: Sequence[ShoppingListItem]) -> ShoppingListSummary:
    return ShoppingListSummary(
        total_items=len(items),
        checked_items=sum(1 for item in items if item.is_checked),
    )


def ingredient_sources(
    ingredient_name: str,
    meal_ids: Iterable[int],
    meals_by_id: Mapping[int, Meal],
) -> list[IngredientSource]:
    """
    List the meals that contribute an ingredient and the amount each needs.

    Meals that are missing, or that no longer contain the ingredient, are
    left out. Results follow ascending meal id.
    """
    wanted = normalize_name(ingredient_name)
    sources: list[IngredientSource] = []
    for meal_id in sorted(set(meal_ids)):
        meal = meals_by_id.get(meal_id)
        if meal is None:
            continue
        ingredient = next((i for i in meal.ingredients if normalize_name(i.name) == wanted), None)
        if ingredient is None:
            continue
        sources.append(
            IngredientSource(
                meal_id=meal.id,
                meal_name=meal.name,
                quantity=ingredient.quantity,
                unit=ingredient.unit,
            )
        )
    return sources
