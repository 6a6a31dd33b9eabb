import pytest

from conftest import NEXT_WEEK, WEEK, recipe_payload

from mealweek.errors import NotFoundError, ValidationError
from mealweek.schemas.recipe import NutritionTotals
from mealweek.services import planner
from mealweek.services.pricing import PriceEstimator
from mealweek.storage import repositories


def test_add_recipe_computes_and_stores_nutrition(session, resolver):
    recipe = planner.add_recipe(session, recipe_payload(), resolver)
    assert recipe.nutrition == NutritionTotals(calories=330, protein=62.0, fat=7.2, carbohydrates=0.0)
    assert repositories.get_recipe(session, recipe.id).calories == 330


def test_add_recipe_without_ingredients_has_no_nutrition(session, resolver, lookup):
    recipe = planner.add_recipe(session, recipe_payload(ingredients=[]), resolver)
    assert recipe.nutrition is None
    assert lookup.calls == []


def test_add_recipe_with_only_unknown_ingredients_stores_zeros(session, resolver):
    recipe = planner.add_recipe(
        session, recipe_payload(ingredients=[{"name": "巧克力", "quantity_grams": 50}]), resolver
    )
    assert recipe.nutrition == NutritionTotals()


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"day_of_week": "Funday"},
        {"meal_type": "Brunch"},
        {"week_start_date": "2024-05-08"},
        {"ingredients": [{"name": "鸡蛋", "quantity_grams": 0}]},
        {"ingredients": [{"name": "", "quantity_grams": 10}]},
    ],
)
def test_invalid_payload_rejected_before_any_write(session, resolver, lookup, overrides):
    payload = {**recipe_payload(), **overrides}
    with pytest.raises(ValidationError) as excinfo:
        planner.add_recipe(session, payload, resolver)
    assert excinfo.value.errors
    assert lookup.calls == []
    assert repositories.list_recipes(session) == []


def test_update_recomputes_nutrition(session, resolver):
    recipe = planner.add_recipe(session, recipe_payload(), resolver)
    updated = planner.update_recipe(
        session,
        recipe.id,
        recipe_payload(ingredients=[{"name": "米饭", "quantity_grams": 200}]),
        resolver,
    )
    assert updated.calories == 260
    assert [i.name for i in updated.ingredients] == ["米饭"]


def test_update_missing_recipe_skips_lookups(session, resolver, lookup):
    with pytest.raises(NotFoundError):
        planner.update_recipe(session, "missing", recipe_payload(), resolver)
    assert lookup.calls == []


def test_refresh_nutrition_uses_current_lookup(session, resolver, lookup):
    recipe = planner.add_recipe(
        session, recipe_payload(ingredients=[{"name": "西兰花", "quantity_grams": 100}]), resolver
    )
    assert recipe.calories == 34
    lookup.table["西兰花"] = lookup.table["米饭"]
    refreshed = planner.refresh_nutrition(session, recipe.id, resolver)
    assert refreshed.calories == 130


def test_replace_week_accepts_string_key(session, resolver):
    planner.add_recipe(session, recipe_payload(name="old"), resolver)
    recipes = planner.replace_week(
        session,
        "2024-05-06",
        [recipe_payload(name="new", day="Sunday", meal="Dinner")],
        resolver,
    )
    assert [(r.name, r.day_of_week) for r in recipes] == [("new", "Sunday")]
    assert recipes[0].calories == 330


def test_replace_week_rejects_non_monday(session, resolver):
    with pytest.raises(ValidationError):
        planner.replace_week(session, "2024-05-07", [], resolver)


def test_aggregate_week_from_store(session, resolver):
    planner.add_recipe(session, recipe_payload(ingredients=[{"name": "鸡蛋", "quantity_grams": 50}]), resolver)
    planner.add_recipe(
        session,
        recipe_payload(day="Tuesday", ingredients=[{"name": "鸡蛋", "quantity_grams": 100}]),
        resolver,
    )
    summary = planner.aggregate_week(session, WEEK, PriceEstimator())
    proteins = next(b for b in summary.categorized if b.category == "proteins")
    assert [(i.name, i.total_quantity_grams) for i in proteins.items] == [("鸡蛋", 150)]
    assert summary.total_price == 0.75


def test_seed_from_suggestions_appends(session, resolver):
    planner.add_recipe(session, recipe_payload(name="existing"), resolver)
    created = planner.seed_from_suggestions(
        session,
        WEEK,
        [{"name": "番茄炒蛋", "dayOfWeek": "Wednesday", "mealType": "Dinner"}, {"name": ""}],
        resolver,
    )
    assert [r.name for r in created] == ["番茄炒蛋"]
    assert created[0].ingredients == []
    assert created[0].nutrition is None
    assert {r.name for r in planner.get_week(session, WEEK)} == {"existing", "番茄炒蛋"}


def test_seed_from_suggestions_replaces(session, resolver):
    planner.add_recipe(session, recipe_payload(name="existing"), resolver)
    planner.seed_from_suggestions(session, WEEK, [{"name": "粥"}], resolver, replace=True)
    week = planner.get_week(session, WEEK)
    assert [(r.name, r.day_of_week, r.meal_type) for r in week] == [("粥", "Monday", "Dinner")]


def test_suggestion_context(session, resolver):
    planner.add_recipe(session, recipe_payload(name="next week dish", week=NEXT_WEEK), resolver)
    context = planner.suggestion_context(session, NEXT_WEEK)
    assert context.previous_week_recipes is None
    assert context.existing_current_week_recipes.startswith("Day: Monday, Meal: Lunch, Recipe: next week dish")

    planner.add_recipe(session, recipe_payload(name="this week dish"), resolver)
    context = planner.suggestion_context(session, NEXT_WEEK)
    assert "this week dish" in context.previous_week_recipes


@pytest.mark.parametrize("quantity", [float("inf"), float("nan"), 1e308])
def test_non_finite_or_huge_quantity_rejected(session, resolver, lookup, quantity):
    payload = recipe_payload(ingredients=[{"name": "鸡胸肉", "quantity_grams": quantity}])
    with pytest.raises(ValidationError):
        planner.add_recipe(session, payload, resolver)
    assert lookup.calls == []
    assert repositories.list_recipes(session) == []


def test_duplicate_ingredient_ids_rejected(session, resolver):
    payload = recipe_payload(
        ingredients=[
            {"id": "egg", "name": "鸡蛋", "quantity_grams": 50},
            {"id": "egg", "name": "鸡蛋", "quantity_grams": 60},
        ]
    )
    with pytest.raises(ValidationError) as excinfo:
        planner.add_recipe(session, payload, resolver)
    assert "duplicate ingredient id" in excinfo.value.errors[0]["msg"]
    assert repositories.list_recipes(session) == []
