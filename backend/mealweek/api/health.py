from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from mealweek.config import settings
from mealweek.logging import get_logger
from mealweek.storage import db

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
def health() -> dict:
    try:
        database = "ok" if db.ping() else "unavailable"
    except SQLAlchemyError as e:
        logger.warning("health.db_unavailable error=%s", e)
        database = "unavailable"
    return {"status": "ok", "app": settings.app_name, "database": database}
