"""
Shopping-list price estimate.

This is an approximation from a static per-gram table (currency units per gram),
with a flat default rate for anything unlisted. It is not a pricing oracle and the
result must never be presented as an actual price.
"""

import math
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from mealweek.config import settings
from mealweek.errors import PricingUnavailable
from mealweek.logging import get_logger
from mealweek.schemas.recipe import AggregatedIngredient
from mealweek.services.catalog import normalize_name
from mealweek.utils.numbers import round_half_up

logger = get_logger(__name__)

PRICE_PER_GRAM = MappingProxyType({
    "鸡胸肉": 0.02,
    "鸡腿肉": 0.018,
    "牛肉": 0.03,
    "猪肉": 0.015,
    "鱼": 0.025,
    "虾": 0.04,
    "鸡蛋": 0.005,  # ~0.25 per 50g egg
    "豆腐": 0.008,
    "西兰花": 0.01,
    "胡萝卜": 0.005,
    "土豆": 0.003,
    "洋葱": 0.004,
    "大蒜": 0.015,
    "姜": 0.012,
    "西红柿": 0.006,
    "黄瓜": 0.005,
    "生菜": 0.007,
    "菠菜": 0.009,
    "蘑菇": 0.018,
    "青椒": 0.007,
    "米饭": 0.002,
    "面条": 0.003,
    "面包": 0.004,
    "牛奶": 0.0015,  # ml treated as g
    "酸奶": 0.002,
    "奶酪": 0.03,
    "苹果": 0.006,
    "香蕉": 0.005,
    "橙子": 0.007,
    "草莓": 0.02,
    "蓝莓": 0.03,
    "橄榄油": 0.02,
    "酱油": 0.005,
    "盐": 0.001,
    "糖": 0.002,
    "胡椒": 0.03,
    "白菜": 0.004,
    "青菜": 0.005,
    "茄子": 0.006,
    "豆芽": 0.003,
    "玉米": 0.005,
    "花生": 0.01,
    "芝麻": 0.02,
    "香菜": 0.015,
    "葱": 0.008,
    "料酒": 0.003,
    "醋": 0.002,
    "淀粉": 0.002,
    "香菇": 0.02,
    "木耳": 0.025,
    "海带": 0.01,
    "紫菜": 0.03,
    "辣椒": 0.01,
    "花椒": 0.04,
    "八角": 0.05,
    "桂皮": 0.06,
})


class PriceEstimator:
    def __init__(
        self,
        prices: Mapping[str, float] = PRICE_PER_GRAM,
        default_rate: Optional[float] = None,
    ) -> None:
        self._prices = MappingProxyType({normalize_name(k): v for k, v in prices.items()})
        self._default_rate = settings.default_price_per_gram if default_rate is None else default_rate

    def rate_for(self, name: str) -> float:
        return self._prices.get(normalize_name(name), self._default_rate)

    def estimate(self, items: Iterable[AggregatedIngredient]) -> float:
        """Sum of grams * per-gram rate, rounded half-up to 2 decimals.

        Any estimator raises PricingUnavailable when it cannot produce a figure.
        """
        try:
            total = math.fsum(item.total_quantity_grams * self.rate_for(item.name) for item in items)
            return round_half_up(total, 2)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise PricingUnavailable(f"price estimate failed: {e}") from e


price_estimator = PriceEstimator()
