"""Configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings

CACHE_TYPE_IDENTIFIER = "shipping_rates"
CACHE_TAG = "SHIPPING_RATES"


class Settings(BaseSettings):
    app_name: str = "ShipRate-Cache"
    debug: bool = False
    log_level: str = "INFO"

    # Store origin and quoting mode
    origin_postcode: str = ""
    multi_quote_enabled: bool = False
    weight_unit: str = "kg"  # kg | lbs

    # Cache
    cache_enabled: bool = True
    cache_backend: str = "memory"  # memory | redis
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "shiprate:"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
