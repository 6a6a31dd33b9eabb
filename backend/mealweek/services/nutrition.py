"""
Nutrition lookup adapter.

The lookup collaborator (remote API or static table) may raise for any single name.
NutritionResolver turns every such failure into a LookupFailure value so one unknown
ingredient never aborts a recipe's nutrition computation.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Protocol

import httpx

from mealweek.config import settings
from mealweek.logging import get_logger
from mealweek.schemas.recipe import NutritionPer100g
from mealweek.services.catalog import normalize_name

logger = get_logger(__name__)


class NutritionLookup(Protocol):
    def get_per_100g(self, name: str) -> NutritionPer100g: ...


@dataclass(frozen=True)
class LookupFailure:
    name: str
    reason: str


# Fallback profile for foods missing from the table when no remote API is configured.
DEFAULT_PROFILE = NutritionPer100g(calories=50, protein=5, fat=1, carbohydrates=5)

NUTRITION_PER_100G = MappingProxyType({
    "鸡胸肉": NutritionPer100g(calories=165, protein=31, fat=3.6, carbohydrates=0),
    "鸡蛋": NutritionPer100g(calories=143, protein=12.6, fat=9.5, carbohydrates=0.7),
    "牛肉": NutritionPer100g(calories=250, protein=26, fat=15, carbohydrates=0),
    "猪肉": NutritionPer100g(calories=242, protein=27, fat=14, carbohydrates=0),
    "三文鱼": NutritionPer100g(calories=208, protein=20, fat=13, carbohydrates=0),
    "虾": NutritionPer100g(calories=99, protein=24, fat=0.3, carbohydrates=0.2),
    "豆腐": NutritionPer100g(calories=76, protein=8, fat=4.8, carbohydrates=1.9),
    "米饭": NutritionPer100g(calories=130, protein=2.7, fat=0.3, carbohydrates=28),
    "面条": NutritionPer100g(calories=138, protein=4.5, fat=2.1, carbohydrates=25),
    "面包": NutritionPer100g(calories=265, protein=9, fat=3.2, carbohydrates=49),
    "土豆": NutritionPer100g(calories=77, protein=2, fat=0.1, carbohydrates=17),
    "燕麦": NutritionPer100g(calories=389, protein=16.9, fat=6.9, carbohydrates=66),
    "西兰花": NutritionPer100g(calories=34, protein=2.8, fat=0.4, carbohydrates=7),
    "胡萝卜": NutritionPer100g(calories=41, protein=0.9, fat=0.2, carbohydrates=10),
    "西红柿": NutritionPer100g(calories=18, protein=0.9, fat=0.2, carbohydrates=3.9),
    "菠菜": NutritionPer100g(calories=23, protein=2.9, fat=0.4, carbohydrates=3.6),
    "苹果": NutritionPer100g(calories=52, protein=0.3, fat=0.2, carbohydrates=14),
    "香蕉": NutritionPer100g(calories=89, protein=1.1, fat=0.3, carbohydrates=23),
    "牛奶": NutritionPer100g(calories=61, protein=3.2, fat=3.3, carbohydrates=4.8),
    "酸奶": NutritionPer100g(calories=59, protein=10, fat=0.4, carbohydrates=3.6),
    "橄榄油": NutritionPer100g(calories=884, protein=0, fat=100, carbohydrates=0),
    "chicken breast": NutritionPer100g(calories=165, protein=31, fat=3.6, carbohydrates=0),
    "egg": NutritionPer100g(calories=143, protein=12.6, fat=9.5, carbohydrates=0.7),
    "rice": NutritionPer100g(calories=130, protein=2.7, fat=0.3, carbohydrates=28),
    "broccoli": NutritionPer100g(calories=34, protein=2.8, fat=0.4, carbohydrates=7),
    "milk": NutritionPer100g(calories=61, protein=3.2, fat=3.3, carbohydrates=4.8),
})


class StaticNutritionLookup:
    """Table-backed lookup. Unknown names raise unless a default profile is given."""

    def __init__(
        self,
        table: Mapping[str, NutritionPer100g] = NUTRITION_PER_100G,
        default: Optional[NutritionPer100g] = None,
    ) -> None:
        self._table = MappingProxyType({normalize_name(k): v for k, v in table.items()})
        self._default = default

    def get_per_100g(self, name: str) -> NutritionPer100g:
        profile = self._table.get(normalize_name(name))
        if profile is not None:
            return profile
        if self._default is not None:
            return self._default
        raise LookupError(f"no nutrition data for {name!r}")


class HttpNutritionLookup:
    """Remote nutrition API: GET {base_url}/nutrition?name=... -> per-100g macros."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._base_url = (base_url or settings.nutrition_api_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.nutrition_api_key
        self._timeout = timeout or settings.nutrition_timeout_s

    def _headers(self) -> dict:
        return {"X-API-Key": self._api_key} if self._api_key else {}

    def get_per_100g(self, name: str) -> NutritionPer100g:
        logger.info("nutrition.http.lookup name=%s", name)
        resp = httpx.get(
            f"{self._base_url}/nutrition",
            headers=self._headers(),
            params={"name": name},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
        data = payload.get("data", payload) if isinstance(payload, dict) else {}
        return NutritionPer100g(
            calories=data["calories"],
            protein=data["protein"],
            fat=data["fat"],
            carbohydrates=data.get("carbohydrates", data.get("carbs")),
        )


class NutritionResolver:
    def __init__(self, lookup: NutritionLookup) -> None:
        self._lookup = lookup

    def lookup(self, name: str) -> NutritionPer100g | LookupFailure:
        try:
            return self._lookup.get_per_100g(name)
        except Exception as e:
            logger.warning("nutrition.lookup_failed name=%s error=%s", name, e)
            return LookupFailure(name=name, reason=str(e) or type(e).__name__)


def build_default_lookup() -> NutritionLookup:
    """Remote API when a URL is configured, otherwise the built-in table."""
    if settings.nutrition_api_url:
        return HttpNutritionLookup()
    return StaticNutritionLookup(default=DEFAULT_PROFILE)


nutrition_resolver = NutritionResolver(build_default_lookup())
