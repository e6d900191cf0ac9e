"""Larder: meal suggestion and shopping-list engine."""

__version__ = "0.1.0"

# Core exports
from larder.core.models import (
    Ingredient,
    Meal,
    MealPlan,
    MealSuggestion,
    MealTag,
    MealType,
    PlanningHistory,
    QuantityDiagnostic,
    ShoppingListItem,
    SuggestionContext,
    SuggestionStatus,
    SuggestionResult,
    SuggestionsFound,
    NoMealsExist,
    NoMatchingMeals,
    SuggestionFailure,
)
from larder.core.interfaces import (
    MealCatalogProvider,
    MealPlanHistoryProvider,
    ExistingShoppingListProvider,
)
from larder.core.aggregate import IngredientAggregator, AggregationResult
from larder.core.shopping import (
    ShoppingListGenerator,
    ShoppingListResult,
    generate_shopping_list,
)
from larder.core.scoring import SuggestionScorer
from larder.core.ranking import SuggestionRanker, get_suggestions, MAX_SUGGESTIONS
from larder.core.history import InMemoryHistoryProvider, build_planning_history
from larder.core.config import ScoringWeights, load_scoring_weights
from larder.core.engine import PlannerEngine
from larder.errors import LarderError, ConfigurationError, ShoppingListGenerationError

__all__ = [
    "Ingredient",
    "Meal",
    "MealPlan",
    "MealSuggestion",
    "MealTag",
    "MealType",
    "PlanningHistory",
    "QuantityDiagnostic",
    "ShoppingListItem",
    "SuggestionContext",
    "SuggestionStatus",
    "SuggestionResult",
    "SuggestionsFound",
    "NoMealsExist",
    "NoMatchingMeals",
    "SuggestionFailure",
    "MealCatalogProvider",
    "MealPlanHistoryProvider",
    "ExistingShoppingListProvider",
    "IngredientAggregator",
    "AggregationResult",
    "ShoppingListGenerator",
    "ShoppingListResult",
    "generate_shopping_list",
    "SuggestionScorer",
    "SuggestionRanker",
    "get_suggestions",
    "MAX_SUGGESTIONS",
    "InMemoryHistoryProvider",
    "build_planning_history",
    "ScoringWeights",
    "load_scoring_weights",
    "PlannerEngine",
    "LarderError",
    "ConfigurationError",
    "ShoppingListGenerationError",
]
