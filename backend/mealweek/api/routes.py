from fastapi import APIRouter

from mealweek.api.catalog import router as catalog_router
from mealweek.api.health import router as health_router
from mealweek.api.recipes import router as recipes_router
from mealweek.api.weeks import router as weeks_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(catalog_router)
router.include_router(recipes_router)
router.include_router(weeks_router)
