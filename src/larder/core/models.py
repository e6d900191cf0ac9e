"""Core immutable data models and suggestion outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union


def normalize_name(value: str) -> str:
    """Equality key for ingredient and meal names: trimmed and case-folded."""
    return (value or "").strip().casefold()


class MealTag(str, Enum):
    """Closed set of tags used for meal-type fit and free filtering."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    QUICK = "quick"
    HEALTHY = "healthy"
    COMFORT_FOOD = "comfort_food"
    DESSERT = "dessert"

    @property
    def display_name(self) -> str:
        if self in (MealTag.GLUTEN_FREE, MealTag.DAIRY_FREE):
            return self.value.replace("_", "-").title()
        return self.value.replace("_", " ").title()


class MealType(str, Enum):
    """Planner slot type."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @property
    def matching_tag(self) -> MealTag:
        """The tag a meal must carry to fit this slot."""
        return MealTag(self.value)


class SuggestionStatus(str, Enum):
    """Discriminator for SuggestionResult variants."""

    SUCCESS = "success"
    EMPTY_NO_MEALS = "empty_no_meals"
    EMPTY_NO_MATCHES = "empty_no_matches"
    ERROR = "error"


@dataclass(frozen=True)
class Ingredient:
    """A single ingredient line of a meal."""

    name: str
    quantity: str = ""
    """Free text; usually a decimal number but may be anything ("a pinch")."""

    unit: str = ""


@dataclass(frozen=True)
class Meal:
    """
    Immutable meal record from the library.

    Plans reference meals by id only, so a meal may disappear while plans
    that point at it still exist.
    """

    id: int
    name: str
    ingredients: tuple[Ingredient, ...] = ()
    notes: str = ""
    tags: frozenset[MealTag] = frozenset()


@dataclass(frozen=True)
class MealPlan:
    """Assignment of a meal to a date and slot."""

    id: int
    meal_id: int
    date: date
    meal_type: MealType
    servings: int = 1
    """Recorded but not used to scale ingredient quantities."""


@dataclass(frozen=True)
class ShoppingListItem:
    """One aggregated line of the shopping list."""

    ingredient_name: str
    total_quantity: str
    unit: str = ""
    is_checked: bool = False
    source_meal_ids: frozenset[int] = frozenset()

    @property
    def key(self) -> tuple[str, str]:
        """Aggregation key: normalized name plus the unit exactly as given."""
        return (normalize_name(self.ingredient_name), self.unit)


@dataclass(frozen=True)
class PlanningHistory:
    """How often and how recently a meal has been planned."""

    last_planned_date: Optional[date] = None
    plan_count: int = 0
    plan_dates: tuple[date, ...] = ()


NEVER_PLANNED = PlanningHistory()


@dataclass(frozen=True)
class SuggestionContext:
    """The planner slot a suggestion request is made for."""

    target_date: date
    target_meal_type: MealType
    tag_filter: frozenset[MealTag] = frozenset()
    search_query: str = ""
    excluded_meal_ids: frozenset[int] = frozenset()
    """Meals to leave out entirely, e.g. those already planned this week."""


@dataclass(frozen=True)
class MealSuggestion:
    """A scored candidate for a planner slot. Recomputed on every request."""

    meal: Meal
    score: float
    reasons: tuple[str, ...] = ()
    last_planned_date: Optional[date] = None
    plan_count: int = 0


@dataclass(frozen=True)
class QuantityDiagnostic:
    """Record of a quantity that could not take part in a numeric sum."""

    ingredient_name: str
    unit: str
    meal_id: int
    quantity: str
    reason: str
    """One of 'kept_verbatim', 'dropped_unparseable', 'replaced_by_numeric'."""


@dataclass(frozen=True)
class SuggestionsFound:
    suggestions: tuple[MealSuggestion, ...]

    @property
    def status(self) -> SuggestionStatus:
        return SuggestionStatus.SUCCESS


@dataclass(frozen=True)
class NoMealsExist:
    """The catalog is empty: the caller should offer to create a meal."""

    @property
    def status(self) -> SuggestionStatus:
        return SuggestionStatus.EMPTY_NO_MEALS


@dataclass(frozen=True)
class NoMatchingMeals:
    """Meals exist but the active filters removed all of them."""

    tag_filter: frozenset[MealTag] = frozenset()
    search_query: str = ""

    @property
    def status(self) -> SuggestionStatus:
        return SuggestionStatus.EMPTY_NO_MATCHES


@dataclass(frozen=True)
class SuggestionFailure:
    """Suggestions could not be computed."""

    message: str
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def status(self) -> SuggestionStatus:
        return SuggestionStatus.ERROR


SuggestionResult = Union[SuggestionsFound, NoMealsExist, NoMatchingMeals, SuggestionFailure]
