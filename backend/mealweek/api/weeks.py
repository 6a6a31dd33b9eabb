"""Week-scoped endpoints. Path week keys are ISO dates that must be Mondays."""

from datetime import date

from fastapi import APIRouter

from mealweek.api.errors import to_http
from mealweek.errors import MealPlanError
from mealweek.logging import get_logger
from mealweek.schemas.recipe import (
    RecipeRead,
    SuggestionContext,
    SuggestionSeedRequest,
    WeekReplaceRequest,
    WeekSummary,
)
from mealweek.services import planner
from mealweek.services.nutrition import nutrition_resolver
from mealweek.services.pricing import price_estimator
from mealweek.storage.db import get_session
from mealweek.utils.weeks import week_start_for

router = APIRouter(prefix="/weeks")
logger = get_logger(__name__)


@router.get("/current")
def current_week() -> dict:
    return {"week_start_date": week_start_for(date.today()).isoformat()}


@router.get("/{week_start}", response_model=list[RecipeRead])
def get_week(week_start: str) -> list[RecipeRead]:
    with get_session() as session:
        try:
            return planner.get_week(session, week_start)
        except MealPlanError as e:
            raise to_http(e) from e


@router.put("/{week_start}", response_model=list[RecipeRead])
def replace_week(week_start: str, request: WeekReplaceRequest) -> list[RecipeRead]:
    logger.info("weeks.replace week=%s recipes=%s", week_start, len(request.recipes))
    with get_session() as session:
        try:
            return planner.replace_week(session, week_start, request.recipes, nutrition_resolver)
        except MealPlanError as e:
            raise to_http(e) from e


@router.get("/{week_start}/summary", response_model=WeekSummary)
def week_summary(week_start: str) -> WeekSummary:
    with get_session() as session:
        try:
            return planner.aggregate_week(session, week_start, price_estimator)
        except MealPlanError as e:
            raise to_http(e) from e


@router.get("/{week_start}/suggestion-context", response_model=SuggestionContext)
def suggestion_context(week_start: str) -> SuggestionContext:
    with get_session() as session:
        try:
            return planner.suggestion_context(session, week_start)
        except MealPlanError as e:
            raise to_http(e) from e


@router.post("/{week_start}/suggestions", response_model=list[RecipeRead], status_code=201)
def seed_suggestions(week_start: str, request: SuggestionSeedRequest) -> list[RecipeRead]:
    with get_session() as session:
        try:
            return planner.seed_from_suggestions(
                session,
                week_start,
                request.suggested_recipes,
                nutrition_resolver,
                replace=request.replace,
            )
        except MealPlanError as e:
            raise to_http(e) from e
