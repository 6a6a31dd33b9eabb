from fastapi import APIRouter, Response

from mealweek.api.errors import to_http
from mealweek.errors import MealPlanError
from mealweek.logging import get_logger
from mealweek.schemas.recipe import RecipeDraft, RecipeRead
from mealweek.services import planner
from mealweek.services.nutrition import nutrition_resolver
from mealweek.storage.db import get_session
from mealweek.storage.repositories import get_recipe, list_recipes

router = APIRouter()
logger = get_logger(__name__)


@router.get("/recipes", response_model=list[RecipeRead])
def get_all_recipes() -> list[RecipeRead]:
    with get_session() as session:
        return list_recipes(session)


@router.get("/recipes/{recipe_id}", response_model=RecipeRead)
def get_recipe_by_id(recipe_id: str) -> RecipeRead:
    with get_session() as session:
        try:
            return get_recipe(session, recipe_id)
        except MealPlanError as e:
            raise to_http(e) from e


@router.post("/recipes", response_model=RecipeRead, status_code=201)
def add_recipe(draft: RecipeDraft) -> RecipeRead:
    logger.info(
        "recipes.add name=%s week=%s slot=%s/%s ingredients=%s",
        draft.name,
        draft.week_start_date,
        draft.day_of_week,
        draft.meal_type,
        len(draft.ingredients),
    )
    with get_session() as session:
        try:
            return planner.add_recipe(session, draft, nutrition_resolver)
        except MealPlanError as e:
            raise to_http(e) from e


@router.put("/recipes/{recipe_id}", response_model=RecipeRead)
def update_recipe(recipe_id: str, draft: RecipeDraft) -> RecipeRead:
    with get_session() as session:
        try:
            return planner.update_recipe(session, recipe_id, draft, nutrition_resolver)
        except MealPlanError as e:
            raise to_http(e) from e


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(recipe_id: str) -> Response:
    with get_session() as session:
        try:
            planner.delete_recipe(session, recipe_id)
        except MealPlanError as e:
            raise to_http(e) from e
    return Response(status_code=204)


@router.post("/recipes/{recipe_id}/nutrition/refresh", response_model=RecipeRead)
def refresh_recipe_nutrition(recipe_id: str) -> RecipeRead:
    with get_session() as session:
        try:
            return planner.refresh_nutrition(session, recipe_id, nutrition_resolver)
        except MealPlanError as e:
            raise to_http(e) from e
