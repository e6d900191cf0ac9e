"""Ingredient aggregation: merge ingredient lines into shopping-list items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from larder.core.models import (
    Ingredient,
    QuantityDiagnostic,
    ShoppingListItem,
    normalize_name,
)
from larder.core.quantities import format_quantity, parse_quantity

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    display_name: str
    unit: str
    total: Decimal | None = None
    verbatim: str | None = None
    numeric_contributions: int = 0
    first_numeric_text: str = ""
    meal_ids: set[int] = field(default_factory=set)

    def quantity_text(self) -> str:
        if self.total is not None:
            if self.numeric_contributions == 1:
                return self.first_numeric_text
            return format_quantity(self.total)
        return self.verbatim or ""


@dataclass(frozen=True)
class AggregationResult:
    items: list[ShoppingListItem]
    diagnostics: list[QuantityDiagnostic]


class IngredientAggregator:
    """
    Combines (ingredient, source meal id) pairs into one item per key.

    Key is (normalized name, unit). Units are compared exactly as given, so
    "Milk"/"L" and "milk"/"ml" stay separate: there is no unit conversion.

    Quantities are summed when every contribution parses as a decimal.
    Unparseable text is kept verbatim only while no numeric value exists for
    the key; otherwise it is dropped and reported as a diagnostic.
    """

    def aggregate(self, ingredients_with_source: Iterable[tuple[Ingredient, int]]) -> list[ShoppingListItem]:
        return self.aggregate_with_diagnostics(ingredients_with_source).items

    def aggregate_with_diagnostics(
        self, ingredients_with_source: Iterable[tuple[Ingredient, int]]
    ) -> AggregationResult:
        """
        Aggregate ingredients and report lossy quantity merges.

        Args:
            ingredients_with_source: Pairs of Ingredient and the id of the meal it came from

        Returns:
            AggregationResult with items in first-seen key order and the diagnostics
        """
        entries: dict[tuple[str, str], _Entry] = {}
        diagnostics: list[QuantityDiagnostic] = []

        for ingredient, meal_id in ingredients_with_source:
            unit = ingredient.unit or ""
            key = (normalize_name(ingredient.name), unit)
            entry = entries.get(key)
            if entry is None:
                entry = _Entry(display_name=(ingredient.name or "").strip(), unit=unit)
                entries[key] = entry

            self._merge_quantity(entry, ingredient, meal_id, diagnostics)
            entry.meal_ids.add(meal_id)

        items = [
            ShoppingListItem(
                ingredient_name=entry.display_name,
                total_quantity=entry.quantity_text(),
                unit=entry.unit,
                is_checked=False,
                source_meal_ids=frozenset(entry.meal_ids),
            )
            for entry in entries.values()
        ]
        return AggregationResult(items=items, diagnostics=diagnostics)

    def _merge_quantity(
        self,
        entry: _Entry,
        ingredient: Ingredient,
        meal_id: int,
        diagnostics: list[QuantityDiagnostic],
    ) -> None:
        raw = (ingredient.quantity or "").strip()
        value = parse_quantity(raw)

        if value is not None:
            if entry.total is None:
                if entry.verbatim:
                    diagnostics.append(self._diagnostic(entry, meal_id, entry.verbatim, "replaced_by_numeric"))
                    logger.warning(
                        f"Quantity '{entry.verbatim}' for {entry.display_name!r} ({entry.unit}) "
                        f"replaced by numeric value from meal {meal_id}"
                    )
                    entry.verbatim = None
                entry.total = value
                entry.first_numeric_text = raw
            else:
                entry.total += value
            entry.numeric_contributions += 1
            return

        if entry.total is None and not entry.verbatim:
            entry.verbatim = raw
            if raw:
                diagnostics.append(self._diagnostic(entry, meal_id, raw, "kept_verbatim"))
            return

        diagnostics.append(self._diagnostic(entry, meal_id, raw, "dropped_unparseable"))
        logger.warning(
            f"Dropped unparseable quantity '{raw}' for {entry.display_name!r} ({entry.unit}) from meal {meal_id}"
        )

    def _diagnostic(self, entry: _Entry, meal_id: int, quantity: str, reason: str) -> QuantityDiagnostic:
        return QuantityDiagnostic(
            ingredient_name=entry.display_name,
            unit=entry.unit,
            meal_id=meal_id,
            quantity=quantity,
            reason=reason,
        )
