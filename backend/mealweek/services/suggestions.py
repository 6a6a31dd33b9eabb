"""
Boundary for recipe-suggestion generators.

Only the shape of generator output is checked. Items without a name are dropped;
a missing or unrecognised day/meal falls back to the configured default slot
instead of failing the batch. Seeded recipes start with no ingredients.
"""

from datetime import date
from typing import Any, Iterable, Optional, Sequence

from mealweek.config import settings
from mealweek.logging import get_logger
from mealweek.schemas.recipe import RecipeDraft, RecipeRead, RecipeSuggestion
from mealweek.utils.weeks import DAYS_OF_WEEK

logger = get_logger(__name__)


def _pick(item: dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _match_choice(value: Optional[str], choices: Sequence[str], fallback: str) -> str:
    if value is None:
        return fallback
    for choice in choices:
        if choice.casefold() == value.casefold():
            return choice
    return fallback


def coerce_suggestions(raw_items: Iterable[Any]) -> list[RecipeSuggestion]:
    suggestions: list[RecipeSuggestion] = []
    dropped = 0
    for item in raw_items:
        if not isinstance(item, dict):
            dropped += 1
            continue
        name = _pick(item, "name")
        if name is None:
            dropped += 1
            continue
        day = _pick(item, "day_of_week", "dayOfWeek")
        meal = _pick(item, "meal_type", "mealType")
        day_of_week = _match_choice(day, DAYS_OF_WEEK, settings.default_day_of_week)
        meal_type = _match_choice(meal, settings.meal_types, settings.default_meal_type)
        if day_of_week != day or meal_type != meal:
            logger.info(
                "suggestion.slot_fallback name=%s day=%s->%s meal=%s->%s",
                name,
                day,
                day_of_week,
                meal,
                meal_type,
            )
        suggestions.append(
            RecipeSuggestion(
                name=name,
                description=_pick(item, "description"),
                day_of_week=day_of_week,
                meal_type=meal_type,
            )
        )
    if dropped:
        logger.warning("suggestion.dropped count=%s", dropped)
    return suggestions


def drafts_from_suggestions(
    week_start: date, suggestions: Iterable[RecipeSuggestion]
) -> list[RecipeDraft]:
    return [
        RecipeDraft(
            name=s.name,
            description=s.description,
            week_start_date=week_start,
            day_of_week=s.day_of_week,
            meal_type=s.meal_type,
            ingredients=[],
        )
        for s in suggestions
    ]


def summarize_week(recipes: Sequence[RecipeRead]) -> Optional[str]:
    """Plain-text week summary handed to a generator as context; None for an empty week."""
    if not recipes:
        return None
    blocks = []
    for recipe in recipes:
        lines = [f"Day: {recipe.day_of_week}, Meal: {recipe.meal_type}, Recipe: {recipe.name}"]
        lines.extend(f"- {ing.name} ({ing.quantity_grams:g}g)" for ing in recipe.ingredients)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
