import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from mealweek import main
from mealweek.schemas.recipe import NutritionPer100g
from mealweek.services.nutrition import NutritionResolver
from mealweek.storage import db as db_module

WEEK = date(2024, 5, 6)  # a Monday
NEXT_WEEK = date(2024, 5, 13)

FAKE_NUTRITION = {
    "鸡胸肉": NutritionPer100g(calories=165, protein=31, fat=3.6, carbohydrates=0),
    "鸡蛋": NutritionPer100g(calories=143, protein=12.6, fat=9.5, carbohydrates=0.7),
    "米饭": NutritionPer100g(calories=130, protein=2.7, fat=0.3, carbohydrates=28),
    "西兰花": NutritionPer100g(calories=34, protein=2.8, fat=0.4, carbohydrates=7),
}


class FakeNutritionLookup:
    """Table lookup that records calls; unknown names raise KeyError, `failing` names time out."""

    def __init__(self, table=None, failing=()):
        self.table = dict(FAKE_NUTRITION if table is None else table)
        self.failing = set(failing)
        self.calls: list[str] = []

    def get_per_100g(self, name):
        self.calls.append(name)
        if name in self.failing:
            raise TimeoutError(f"lookup timed out for {name}")
        return self.table[name]


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="lookup")
def lookup_fixture():
    return FakeNutritionLookup()


@pytest.fixture(name="resolver")
def resolver_fixture(lookup):
    return NutritionResolver(lookup)


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine, resolver):
    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr("mealweek.api.recipes.nutrition_resolver", resolver)
    monkeypatch.setattr("mealweek.api.weeks.nutrition_resolver", resolver)

    client = TestClient(main.app)
    return client


def recipe_payload(name="鸡胸肉沙拉", week=WEEK, day="Monday", meal="Lunch", ingredients=None):
    return {
        "name": name,
        "week_start_date": week.isoformat(),
        "day_of_week": day,
        "meal_type": meal,
        "ingredients": ingredients if ingredients is not None else [
            {"name": "鸡胸肉", "quantity_grams": 200}
        ],
    }
