"""Error taxonomy for the meal-plan core.

Ingredient-level lookup failures are not exceptions: the nutrition resolver
returns a ``LookupFailure`` value and the calculator skips that ingredient.
Everything at recipe or week granularity is raised to the caller.
"""

from typing import Any


class MealPlanError(Exception):
    """Base class for errors surfaced to callers of the planner."""


class ValidationError(MealPlanError):
    """Malformed input rejected at the boundary, nothing was applied."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(MealPlanError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe {recipe_id} not found")
        self.recipe_id = recipe_id


class PersistenceError(MealPlanError):
    """A transaction failed and was rolled back as a whole."""

    def __init__(self, operation: str, context: dict[str, Any], cause: Exception):
        details = " ".join(f"{k}={v}" for k, v in context.items())
        super().__init__(f"{operation} failed ({details}): {cause}")
        self.operation = operation
        self.context = context
        self.cause = cause


class PricingUnavailable(MealPlanError):
    """Price estimation failed; aggregation reports the price as unavailable."""
