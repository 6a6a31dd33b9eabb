from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "mealweek"
    env: str = "local"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/mealweek.db"

    # Empty URL -> use the built-in per-100g table instead of a remote API.
    nutrition_api_url: str = ""
    nutrition_api_key: str = ""
    nutrition_timeout_s: float = 10.0
    # ThreadPoolExecutor workers for per-ingredient nutrition lookups.
    nutrition_max_workers: int = 8

    meal_types: list[str] = ["Breakfast", "Lunch", "Dinner", "Snack"]
    # Used when a suggestion omits or garbles its slot.
    default_day_of_week: str = "Monday"
    default_meal_type: str = "Dinner"

    # Per-gram rate for ingredients missing from the price table.
    default_price_per_gram: float = 0.01

    class Config:
        env_file = ".env"


settings = Settings()
