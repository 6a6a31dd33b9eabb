from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlmodel import Field, Relationship, SQLModel


def new_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Recipe(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: Optional[str] = None
    week_start_date: date = Field(index=True)
    day_of_week: str
    meal_type: str
    # Cached totals derived from ingredients; all None until first computed.
    calories: Optional[float] = None
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbohydrates: Optional[float] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    ingredients: List["Ingredient"] = Relationship(
        back_populates="recipe",
        sa_relationship_kwargs={
            "order_by": "Ingredient.position",
            "cascade": "all, delete-orphan",
            "passive_deletes": True,
        },
    )


class Ingredient(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    recipe_id: str = Field(foreign_key="recipe.id", ondelete="CASCADE", index=True)
    name: str
    quantity_grams: float
    position: int = 0

    recipe: Optional[Recipe] = Relationship(back_populates="ingredients")
