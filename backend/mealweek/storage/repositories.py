import threading
from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from mealweek.config import settings
from mealweek.errors import NotFoundError, PersistenceError, ValidationError
from mealweek.logging import get_logger
from mealweek.schemas.recipe import (
    IngredientDraft,
    IngredientRead,
    NutritionTotals,
    RecipeDraft,
    RecipeRead,
)
from mealweek.storage.models import Ingredient, Recipe, new_id, utc_now
from mealweek.utils.weeks import day_index

logger = get_logger(__name__)

# week_start -> lock serializing replace_week for that week within this process
_week_locks: dict[date, threading.Lock] = {}
_week_locks_guard = threading.Lock()


def _week_lock(week_start: date) -> threading.Lock:
    with _week_locks_guard:
        return _week_locks.setdefault(week_start, threading.Lock())


@contextmanager
def _unit_of_work(session: Session, operation: str, **context: object) -> Iterator[None]:
    """Commit everything done in the block, or roll all of it back."""
    # Rows removed by the database cascade would otherwise linger in the identity map
    # and clash with re-inserted ingredient ids. Callers only ever hold RecipeRead copies.
    session.expunge_all()
    try:
        yield
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "%s.rolled_back %s error=%s",
            operation,
            " ".join(f"{k}={v}" for k, v in context.items()),
            e,
        )
        raise PersistenceError(operation, dict(context), e) from e
    except Exception:
        session.rollback()
        raise


def _to_read(row: Recipe) -> RecipeRead:
    return RecipeRead(
        id=row.id,
        name=row.name,
        description=row.description,
        week_start_date=row.week_start_date,
        day_of_week=row.day_of_week,
        meal_type=row.meal_type,
        ingredients=[
            IngredientRead(id=ing.id, name=ing.name, quantity_grams=ing.quantity_grams)
            for ing in row.ingredients
        ],
        calories=row.calories,
        protein=row.protein,
        fat=row.fat,
        carbohydrates=row.carbohydrates,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _plan_order(recipe: RecipeRead) -> tuple:
    meal_types = settings.meal_types
    meal_rank = meal_types.index(recipe.meal_type) if recipe.meal_type in meal_types else len(meal_types)
    return (
        recipe.week_start_date,
        day_index(recipe.day_of_week),
        meal_rank,
        recipe.created_at.timestamp() if recipe.created_at else 0.0,
        recipe.id,
    )


def _apply_nutrition(row: Recipe, nutrition: Optional[NutritionTotals]) -> None:
    if nutrition is None:
        row.calories = row.protein = row.fat = row.carbohydrates = None
        return
    row.calories = nutrition.calories
    row.protein = nutrition.protein
    row.fat = nutrition.fat
    row.carbohydrates = nutrition.carbohydrates


def _ingredient_rows(recipe_id: str, ingredients: Iterable[IngredientDraft]) -> list[Ingredient]:
    return [
        Ingredient(
            id=ing.id or new_id(),
            recipe_id=recipe_id,
            name=ing.name,
            quantity_grams=ing.quantity_grams,
            position=position,
        )
        for position, ing in enumerate(ingredients)
    ]


def _insert_recipe(
    session: Session,
    draft: RecipeDraft,
    nutrition: Optional[NutritionTotals],
    recipe_id: Optional[str] = None,
) -> str:
    row = Recipe(
        id=recipe_id or new_id(),
        name=draft.name,
        description=draft.description,
        week_start_date=draft.week_start_date,
        day_of_week=draft.day_of_week,
        meal_type=draft.meal_type,
    )
    _apply_nutrition(row, nutrition)
    session.add(row)
    session.add_all(_ingredient_rows(row.id, draft.ingredients))
    session.flush()
    return row.id


def _select_recipes():
    return select(Recipe).options(selectinload(Recipe.ingredients))


def create_recipe(
    session: Session,
    draft: RecipeDraft,
    nutrition: Optional[NutritionTotals] = None,
    recipe_id: Optional[str] = None,
) -> str:
    """Insert the recipe row and all its ingredient rows as one transaction."""
    if recipe_id is not None and not recipe_id.strip():
        raise ValidationError("recipe id must not be blank")
    with _unit_of_work(session, "recipe.create", name=draft.name, week=draft.week_start_date):
        new_recipe_id = _insert_recipe(session, draft, nutrition, recipe_id)
    logger.info(
        "recipe.created id=%s name=%s week=%s ingredients=%s",
        new_recipe_id,
        draft.name,
        draft.week_start_date,
        len(draft.ingredients),
    )
    return new_recipe_id


def create_recipes(
    session: Session,
    entries: Sequence[tuple[RecipeDraft, Optional[NutritionTotals]]],
) -> list[str]:
    """Insert several recipes in one transaction: all of them or none."""
    with _unit_of_work(session, "recipe.create_many", recipes=len(entries)):
        recipe_ids = [_insert_recipe(session, draft, nutrition) for draft, nutrition in entries]
    logger.info("recipes.created count=%s", len(recipe_ids))
    return recipe_ids


def list_recipes(session: Session) -> list[RecipeRead]:
    rows = session.exec(_select_recipes())
    return sorted((_to_read(row) for row in rows), key=_plan_order)


def get_recipe(session: Session, recipe_id: str) -> RecipeRead:
    row = session.exec(_select_recipes().where(Recipe.id == recipe_id)).first()
    if row is None:
        raise NotFoundError(recipe_id)
    return _to_read(row)


def get_week(session: Session, week_start: date) -> list[RecipeRead]:
    rows = session.exec(_select_recipes().where(Recipe.week_start_date == week_start))
    return sorted((_to_read(row) for row in rows), key=_plan_order)


def update_recipe(
    session: Session,
    recipe_id: str,
    draft: RecipeDraft,
    nutrition: Optional[NutritionTotals] = None,
) -> RecipeRead:
    """Replace the recipe's fields and its whole ingredient set; ingredients are not diffed."""
    with _unit_of_work(session, "recipe.update", recipe_id=recipe_id):
        row = session.get(Recipe, recipe_id)
        if row is None:
            raise NotFoundError(recipe_id)
        row.name = draft.name
        row.description = draft.description
        row.week_start_date = draft.week_start_date
        row.day_of_week = draft.day_of_week
        row.meal_type = draft.meal_type
        row.updated_at = utc_now()
        _apply_nutrition(row, nutrition)
        session.add(row)
        session.execute(delete(Ingredient).where(Ingredient.recipe_id == recipe_id))
        session.expire(row, ["ingredients"])
        session.add_all(_ingredient_rows(recipe_id, draft.ingredients))
        session.flush()
    logger.info("recipe.updated id=%s ingredients=%s", recipe_id, len(draft.ingredients))
    return get_recipe(session, recipe_id)


def set_recipe_nutrition(
    session: Session, recipe_id: str, nutrition: Optional[NutritionTotals]
) -> RecipeRead:
    with _unit_of_work(session, "recipe.nutrition", recipe_id=recipe_id):
        row = session.get(Recipe, recipe_id)
        if row is None:
            raise NotFoundError(recipe_id)
        _apply_nutrition(row, nutrition)
        row.updated_at = utc_now()
        session.add(row)
    return get_recipe(session, recipe_id)


def delete_recipe(session: Session, recipe_id: str) -> None:
    """Delete one recipe; its ingredient rows go with it through ON DELETE CASCADE."""
    with _unit_of_work(session, "recipe.delete", recipe_id=recipe_id):
        result = session.execute(delete(Recipe).where(Recipe.id == recipe_id))
        if result.rowcount == 0:
            raise NotFoundError(recipe_id)
    logger.info("recipe.deleted id=%s", recipe_id)


def replace_week(
    session: Session,
    week_start: date,
    entries: Sequence[tuple[RecipeDraft, Optional[NutritionTotals]]],
) -> list[str]:
    """
    Delete every recipe of the week and insert the given ones in a single transaction.
    Concurrent calls for the same week run one after the other; the last commit wins.
    """
    for draft, _ in entries:
        if draft.week_start_date != week_start:
            raise ValidationError(
                f"recipe {draft.name!r} belongs to week {draft.week_start_date}, not {week_start}"
            )
    with _week_lock(week_start):
        with _unit_of_work(session, "week.replace", week=week_start, recipes=len(entries)):
            removed = session.execute(
                delete(Recipe).where(Recipe.week_start_date == week_start)
            ).rowcount
            recipe_ids = [_insert_recipe(session, draft, nutrition) for draft, nutrition in entries]
    logger.info("week.replaced week=%s removed=%s inserted=%s", week_start, removed, len(recipe_ids))
    return recipe_ids
