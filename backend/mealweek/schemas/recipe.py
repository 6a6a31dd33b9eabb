from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mealweek.config import settings
from mealweek.utils.weeks import DAYS_OF_WEEK, is_week_key

# Per ingredient line, 1 tonne.
MAX_QUANTITY_GRAMS = 1_000_000
# Ceiling for any per-100g value a lookup may report.
MAX_PER_100G = 10_000


class IngredientDraft(BaseModel):
    id: str | None = None
    name: str
    quantity_grams: float = Field(gt=0, le=MAX_QUANTITY_GRAMS, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ingredient name must not be empty")
        return value

    @field_validator("id")
    @classmethod
    def _blank_id_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class RecipeDraft(BaseModel):
    """A recipe as submitted by a caller; ingredients are the source of truth."""

    name: str
    description: str | None = None
    week_start_date: date
    day_of_week: str
    meal_type: str
    ingredients: list[IngredientDraft] = []

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("recipe name must not be empty")
        return value

    @field_validator("week_start_date")
    @classmethod
    def _week_starts_monday(cls, value: date) -> date:
        if not is_week_key(value):
            raise ValueError(f"week_start_date {value.isoformat()} is not a Monday")
        return value

    @field_validator("day_of_week")
    @classmethod
    def _known_day(cls, value: str) -> str:
        value = value.strip()
        if value not in DAYS_OF_WEEK:
            raise ValueError(f"day_of_week must be one of {', '.join(DAYS_OF_WEEK)}")
        return value

    @field_validator("meal_type")
    @classmethod
    def _known_meal_type(cls, value: str) -> str:
        value = value.strip()
        if value not in settings.meal_types:
            raise ValueError(f"meal_type must be one of {', '.join(settings.meal_types)}")
        return value

    @model_validator(mode="after")
    def _unique_ingredient_ids(self) -> "RecipeDraft":
        seen: set[str] = set()
        for ing in self.ingredients:
            if ing.id is None:
                continue
            if ing.id in seen:
                raise ValueError(f"duplicate ingredient id {ing.id!r}")
            seen.add(ing.id)
        return self


class NutritionPer100g(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    calories: float = Field(ge=0, le=MAX_PER_100G)
    protein: float = Field(ge=0, le=MAX_PER_100G)
    fat: float = Field(ge=0, le=MAX_PER_100G)
    carbohydrates: float = Field(ge=0, le=MAX_PER_100G)


class NutritionTotals(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbohydrates: float = 0.0


class IngredientRead(BaseModel):
    id: str
    name: str
    quantity_grams: float


class RecipeRead(BaseModel):
    id: str
    name: str
    description: str | None = None
    week_start_date: date
    day_of_week: str
    meal_type: str
    ingredients: list[IngredientRead] = []
    calories: float | None = None
    protein: float | None = None
    fat: float | None = None
    carbohydrates: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def nutrition(self) -> NutritionTotals | None:
        if self.calories is None:
            return None
        return NutritionTotals(
            calories=self.calories,
            protein=self.protein or 0.0,
            fat=self.fat or 0.0,
            carbohydrates=self.carbohydrates or 0.0,
        )


class AggregatedIngredient(BaseModel):
    name: str
    total_quantity_grams: float


class CategoryBucket(BaseModel):
    category: str
    label: str
    items: list[AggregatedIngredient] = []


class DayNutrition(BaseModel):
    day_of_week: str
    totals: NutritionTotals


class WeekNutrition(BaseModel):
    totals: NutritionTotals
    by_day: list[DayNutrition]
    recipes_counted: int
    recipes_without_nutrition: int


class WeekSummary(BaseModel):
    week_start_date: date
    categorized: list[CategoryBucket]
    # Approximation from a static per-gram table, not a quote.
    total_price: float | None = None
    price_available: bool = True
    nutrition: WeekNutrition | None = None


class WeekReplaceRequest(BaseModel):
    recipes: list[RecipeDraft]


class RecipeSuggestion(BaseModel):
    name: str
    description: str | None = None
    day_of_week: str
    meal_type: str


class SuggestionSeedRequest(BaseModel):
    # Raw generator items; shape is coerced, content is not validated.
    suggested_recipes: list[dict] = []
    replace: bool = False


class SuggestionContext(BaseModel):
    week_start_date: date
    previous_week_recipes: str | None = None
    existing_current_week_recipes: str | None = None
