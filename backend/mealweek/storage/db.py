import sqlite3
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.engine import Engine, make_url

from sqlmodel import SQLModel, Session, create_engine

from mealweek.config import settings
from mealweek.logging import get_logger
from mealweek.storage import models  # noqa: F401  registers the tables

logger = get_logger(__name__)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _make_engine(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = _make_engine(settings.database_url)


def _ensure_sqlite_dir(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def create_db_and_tables() -> None:
    _ensure_sqlite_dir(str(engine.url))
    SQLModel.metadata.create_all(engine)
    logger.info("db.ready url=%s", engine.url.render_as_string(hide_password=True))


def ping() -> bool:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


def get_session() -> Session:
    return Session(engine)
