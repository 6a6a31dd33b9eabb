"""
Recipe nutrition totals from an ingredient list.

Each ingredient contributes per100g * grams / 100. Ingredients with an empty name,
a quantity outside (0, MAX_QUANTITY_GRAMS] or a failed lookup are skipped.
Contributions are summed with math.fsum, so the totals do not depend on
ingredient order or on the order in which concurrent lookups complete.
Rounding is half away from zero: calories to whole numbers,
protein/fat/carbohydrates to one decimal.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Protocol

from mealweek.config import settings
from mealweek.logging import get_logger
from mealweek.schemas.recipe import MAX_QUANTITY_GRAMS, NutritionPer100g, NutritionTotals
from mealweek.services.catalog import normalize_name
from mealweek.services.nutrition import LookupFailure, NutritionResolver
from mealweek.utils.numbers import round_half_up
from mealweek.utils.timing import time_span

logger = get_logger(__name__)

MACROS = ("calories", "protein", "fat", "carbohydrates")
DECIMALS = {"calories": 0, "protein": 1, "fat": 1, "carbohydrates": 1}


class IngredientLike(Protocol):
    name: str
    quantity_grams: float


def _usable(ingredient: IngredientLike) -> bool:
    quantity = ingredient.quantity_grams
    if not normalize_name(ingredient.name) or not math.isfinite(quantity):
        return False
    return 0 < quantity <= MAX_QUANTITY_GRAMS


def _resolve_all(
    names: list[str], resolver: NutritionResolver, max_workers: Optional[int]
) -> dict[str, NutritionPer100g | LookupFailure]:
    if not names:
        return {}
    workers = min(max_workers or settings.nutrition_max_workers, len(names))
    with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
        return dict(zip(names, ex.map(resolver.lookup, names)))


def compute_totals(
    ingredients: Iterable[IngredientLike],
    resolver: NutritionResolver,
    max_workers: Optional[int] = None,
) -> NutritionTotals:
    """Total macros of an ingredient list. An empty or fully unresolved list gives all zeros."""
    usable = []
    for ing in ingredients:
        if _usable(ing):
            usable.append(ing)
        else:
            logger.info(
                "nutrition.ingredient_skipped name=%r quantity_grams=%s", ing.name, ing.quantity_grams
            )

    # One lookup per distinct name, always sent with the same spelling whatever the order.
    names_by_key: dict[str, str] = {}
    for ing in usable:
        key = normalize_name(ing.name)
        spelling = ing.name.strip()
        names_by_key[key] = min(names_by_key.get(key, spelling), spelling)

    with time_span("nutrition.batch", ingredients=len(usable), lookups=len(names_by_key)):
        resolved = _resolve_all(list(names_by_key.values()), resolver, max_workers)

    parts: dict[str, list[float]] = {macro: [] for macro in MACROS}
    failed = 0
    for ing in usable:
        profile = resolved[names_by_key[normalize_name(ing.name)]]
        if isinstance(profile, LookupFailure):
            failed += 1
            continue
        factor = ing.quantity_grams / 100
        for macro in MACROS:
            parts[macro].append(getattr(profile, macro) * factor)

    if failed:
        logger.warning("nutrition.partial resolved=%s failed=%s", len(usable) - failed, failed)
    return NutritionTotals(
        **{macro: round_half_up(math.fsum(parts[macro]), DECIMALS[macro]) for macro in MACROS}
    )
