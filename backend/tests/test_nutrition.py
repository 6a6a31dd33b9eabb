import pytest
import respx
from httpx import Response

from mealweek.schemas.recipe import NutritionPer100g
from mealweek.services import nutrition
from mealweek.services.nutrition import (
    DEFAULT_PROFILE,
    HttpNutritionLookup,
    LookupFailure,
    NutritionResolver,
    StaticNutritionLookup,
    build_default_lookup,
)


class ExplodingLookup:
    def get_per_100g(self, name):
        raise ConnectionError("nutrition service down")


def test_resolver_reports_failure_instead_of_raising():
    result = NutritionResolver(ExplodingLookup()).lookup("鸡蛋")
    assert isinstance(result, LookupFailure)
    assert result.name == "鸡蛋"
    assert "down" in result.reason


def test_resolver_passes_profile_through(resolver):
    result = resolver.lookup("鸡胸肉")
    assert result == NutritionPer100g(calories=165, protein=31, fat=3.6, carbohydrates=0)


def test_static_lookup_known_and_unknown():
    lookup = StaticNutritionLookup()
    assert lookup.get_per_100g(" 鸡胸肉 ").calories == 165
    assert lookup.get_per_100g("Chicken Breast").protein == 31
    with pytest.raises(LookupError):
        lookup.get_per_100g("巧克力")


def test_static_lookup_default_profile():
    lookup = StaticNutritionLookup(default=DEFAULT_PROFILE)
    assert lookup.get_per_100g("巧克力") == DEFAULT_PROFILE


@respx.mock
def test_http_lookup_parses_payload():
    base_url = "https://nutrition.example.com"
    route = respx.get(f"{base_url}/nutrition").mock(
        return_value=Response(
            200,
            json={"data": {"calories": 165, "protein": 31, "fat": 3.6, "carbs": 0}},
        )
    )
    lookup = HttpNutritionLookup(base_url=base_url, api_key="test-key", timeout=1.0)
    profile = lookup.get_per_100g("鸡胸肉")
    assert profile == NutritionPer100g(calories=165, protein=31, fat=3.6, carbohydrates=0)
    request = route.calls.last.request
    assert request.headers["X-API-Key"] == "test-key"
    assert request.url.params["name"] == "鸡胸肉"


@respx.mock
def test_http_lookup_error_becomes_failure():
    base_url = "https://nutrition.example.com"
    respx.get(f"{base_url}/nutrition").mock(return_value=Response(503))
    resolver = NutritionResolver(HttpNutritionLookup(base_url=base_url, api_key="", timeout=1.0))
    assert isinstance(resolver.lookup("鸡蛋"), LookupFailure)


@respx.mock
def test_http_lookup_incomplete_payload_becomes_failure():
    base_url = "https://nutrition.example.com"
    respx.get(f"{base_url}/nutrition").mock(return_value=Response(200, json={"calories": 50}))
    resolver = NutritionResolver(HttpNutritionLookup(base_url=base_url, api_key="", timeout=1.0))
    assert isinstance(resolver.lookup("鸡蛋"), LookupFailure)


def test_build_default_lookup(monkeypatch):
    monkeypatch.setattr(nutrition.settings, "nutrition_api_url", "")
    assert isinstance(build_default_lookup(), StaticNutritionLookup)
    monkeypatch.setattr(nutrition.settings, "nutrition_api_url", "https://nutrition.example.com")
    assert isinstance(build_default_lookup(), HttpNutritionLookup)


@respx.mock
def test_http_lookup_non_finite_payload_becomes_failure():
    base_url = "https://nutrition.example.com"
    respx.get(f"{base_url}/nutrition").mock(
        return_value=Response(
            200,
            content=b'{"calories": Infinity, "protein": 1, "fat": 1, "carbs": 1}',
            headers={"Content-Type": "application/json"},
        )
    )
    resolver = NutritionResolver(HttpNutritionLookup(base_url=base_url, api_key="", timeout=1.0))
    assert isinstance(resolver.lookup("鸡蛋"), LookupFailure)
