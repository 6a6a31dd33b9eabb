import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from mealweek.errors import PricingUnavailable
from mealweek.logging import get_logger
from mealweek.schemas.recipe import (
    AggregatedIngredient,
    DayNutrition,
    NutritionTotals,
    RecipeRead,
    WeekNutrition,
    WeekSummary,
)
from mealweek.services.calculator import DECIMALS, MACROS
from mealweek.services.catalog import group_by_category, normalize_name
from mealweek.services.pricing import PriceEstimator
from mealweek.utils.numbers import round_half_up
from mealweek.utils.timing import time_span
from mealweek.utils.weeks import DAYS_OF_WEEK

logger = get_logger(__name__)


def aggregate_ingredients(recipes: Iterable[RecipeRead]) -> list[AggregatedIngredient]:
    """Sum grams per normalized ingredient name across recipes, sorted by name."""
    grams: dict[str, list[float]] = defaultdict(list)
    for recipe in recipes:
        for ing in recipe.ingredients:
            name = normalize_name(ing.name)
            if not name or not math.isfinite(ing.quantity_grams) or ing.quantity_grams <= 0:
                continue
            grams[name].append(ing.quantity_grams)
    return [
        AggregatedIngredient(name=name, total_quantity_grams=math.fsum(grams[name]))
        for name in sorted(grams)
    ]


def _sum_totals(items: Sequence[NutritionTotals]) -> NutritionTotals:
    return NutritionTotals(
        **{
            macro: round_half_up(math.fsum(getattr(t, macro) for t in items), DECIMALS[macro])
            for macro in MACROS
        }
    )


def week_nutrition(recipes: Iterable[RecipeRead]) -> WeekNutrition:
    """Add up the cached per-recipe totals; recipes not yet computed are counted, not guessed."""
    per_day: dict[str, list[NutritionTotals]] = {day: [] for day in DAYS_OF_WEEK}
    missing = 0
    for recipe in recipes:
        totals = recipe.nutrition
        if totals is None:
            missing += 1
            continue
        per_day[recipe.day_of_week].append(totals)
    counted = [t for day in DAYS_OF_WEEK for t in per_day[day]]
    return WeekNutrition(
        totals=_sum_totals(counted),
        by_day=[DayNutrition(day_of_week=day, totals=_sum_totals(per_day[day])) for day in DAYS_OF_WEEK],
        recipes_counted=len(counted),
        recipes_without_nutrition=missing,
    )


def aggregate_week(
    week_start: date,
    recipes: Sequence[RecipeRead],
    estimator: PriceEstimator,
) -> WeekSummary:
    """
    Categorized shopping list plus price estimate for one week.
    Pricing is best effort: whatever the estimator raises leaves total_price None
    and the shopping list is still returned.
    """
    with time_span("week.aggregate", week=week_start, recipes=len(recipes)):
        items = aggregate_ingredients(recipes)
        categorized = group_by_category(items)
        try:
            total_price = estimator.estimate(items)
            price_available = True
        except PricingUnavailable as e:
            logger.warning("pricing.unavailable week=%s error=%s", week_start, e)
            total_price = None
            price_available = False
        except Exception as e:
            logger.exception("pricing.failed week=%s error=%s", week_start, e)
            total_price = None
            price_available = False
    return WeekSummary(
        week_start_date=week_start,
        categorized=categorized,
        total_price=total_price,
        price_available=price_available,
        nutrition=week_nutrition(recipes),
    )
