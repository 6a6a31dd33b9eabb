from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mealweek.api.routes import router as api_router
from mealweek.config import settings
from mealweek.logging import configure_logging, get_logger
from mealweek.storage.db import create_db_and_tables

app = FastAPI(title="Mealweek API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging()
    logger.info("startup: env=%s meal_types=%s", settings.env, ",".join(settings.meal_types))
    create_db_and_tables()


app.include_router(api_router)
