from fastapi import APIRouter

from mealweek.config import settings
from mealweek.services.catalog import list_categories
from mealweek.utils.weeks import DAYS_OF_WEEK

router = APIRouter()


@router.get("/categories")
def get_categories() -> dict:
    """Shopping-list categories in display order, plus the allowed plan slots."""
    return {
        "categories": list_categories(),
        "days_of_week": list(DAYS_OF_WEEK),
        "meal_types": list(settings.meal_types),
    }
