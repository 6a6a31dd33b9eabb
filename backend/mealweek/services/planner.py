"""
Planner operations used by the API: derive nutrition, then store.

Nutrition lookups and pricing run before a store transaction is opened, so no
database lock is held while waiting on those collaborators.
"""

from datetime import date
from typing import Any, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from mealweek.errors import ValidationError
from mealweek.logging import get_logger
from mealweek.schemas.recipe import (
    NutritionTotals,
    RecipeDraft,
    RecipeRead,
    SuggestionContext,
    WeekSummary,
)
from mealweek.services.aggregator import aggregate_week as build_week_summary
from mealweek.services.calculator import compute_totals
from mealweek.services.nutrition import NutritionResolver
from mealweek.services.pricing import PriceEstimator
from mealweek.services.suggestions import coerce_suggestions, drafts_from_suggestions, summarize_week
from mealweek.storage import repositories
from mealweek.utils.weeks import parse_week_key, previous_week

logger = get_logger(__name__)


def coerce_draft(payload: RecipeDraft | dict[str, Any]) -> RecipeDraft:
    if isinstance(payload, RecipeDraft):
        return payload
    try:
        return RecipeDraft.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid recipe: {e.error_count()} error(s)", e.errors()) from e


def derive_nutrition(draft: RecipeDraft, resolver: NutritionResolver) -> Optional[NutritionTotals]:
    """None for an empty ingredient list (not computed yet), totals otherwise."""
    if not draft.ingredients:
        return None
    return compute_totals(draft.ingredients, resolver)


def get_week(session: Session, week_start: date | str) -> list[RecipeRead]:
    return repositories.get_week(session, parse_week_key(week_start))


def add_recipe(
    session: Session, payload: RecipeDraft | dict[str, Any], resolver: NutritionResolver
) -> RecipeRead:
    draft = coerce_draft(payload)
    nutrition = derive_nutrition(draft, resolver)
    recipe_id = repositories.create_recipe(session, draft, nutrition)
    return repositories.get_recipe(session, recipe_id)


def update_recipe(
    session: Session,
    recipe_id: str,
    payload: RecipeDraft | dict[str, Any],
    resolver: NutritionResolver,
) -> RecipeRead:
    draft = coerce_draft(payload)
    # Fail fast before spending lookups on a missing recipe; the store re-checks in its transaction.
    repositories.get_recipe(session, recipe_id)
    nutrition = derive_nutrition(draft, resolver)
    return repositories.update_recipe(session, recipe_id, draft, nutrition)


def delete_recipe(session: Session, recipe_id: str) -> None:
    repositories.delete_recipe(session, recipe_id)


def refresh_nutrition(session: Session, recipe_id: str, resolver: NutritionResolver) -> RecipeRead:
    """Recompute the cached totals from the stored ingredients."""
    recipe = repositories.get_recipe(session, recipe_id)
    nutrition = compute_totals(recipe.ingredients, resolver) if recipe.ingredients else None
    return repositories.set_recipe_nutrition(session, recipe_id, nutrition)


def replace_week(
    session: Session,
    week_start: date | str,
    payloads: Iterable[RecipeDraft | dict[str, Any]],
    resolver: NutritionResolver,
) -> list[RecipeRead]:
    week = parse_week_key(week_start)
    drafts = [coerce_draft(p) for p in payloads]
    entries = [(draft, derive_nutrition(draft, resolver)) for draft in drafts]
    repositories.replace_week(session, week, entries)
    return repositories.get_week(session, week)


def aggregate_week(session: Session, week_start: date | str, estimator: PriceEstimator) -> WeekSummary:
    week = parse_week_key(week_start)
    recipes = repositories.get_week(session, week)
    return build_week_summary(week, recipes, estimator)


def seed_from_suggestions(
    session: Session,
    week_start: date | str,
    raw_items: Iterable[Any],
    resolver: NutritionResolver,
    replace: bool = False,
) -> list[RecipeRead]:
    """Store generator suggestions as ingredient-less recipes, appended or replacing the week."""
    week = parse_week_key(week_start)
    drafts = drafts_from_suggestions(week, coerce_suggestions(raw_items))
    logger.info("suggestions.seed week=%s count=%s replace=%s", week, len(drafts), replace)
    if replace:
        return replace_week(session, week, drafts, resolver)
    created_ids = repositories.create_recipes(session, [(draft, None) for draft in drafts])
    return [repositories.get_recipe(session, recipe_id) for recipe_id in created_ids]


def suggestion_context(session: Session, week_start: date | str) -> SuggestionContext:
    week = parse_week_key(week_start)
    return SuggestionContext(
        week_start_date=week,
        previous_week_recipes=summarize_week(repositories.get_week(session, previous_week(week))),
        existing_current_week_recipes=summarize_week(repositories.get_week(session, week)),
    )
