"""Service configuration.

Settings are read from environment variables prefixed with ``CARTREC_``
(and an optional ``.env`` file), e.g. ``CARTREC_DATA_DIR=/srv/data``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.recommender.catalog import CART_FILENAME, CATALOG_FILENAME
from src.recommender.content import DEFAULT_TOP_N
from src.recommender.scoring import (
    DEFAULT_CATEGORY_WEIGHT,
    DEFAULT_PRICE_WEIGHT,
    ScoringWeights,
)


class Settings(BaseSettings):

    # Data
    data_dir: str = "data"
    catalog_filename: str = CATALOG_FILENAME
    cart_filename: str = CART_FILENAME

    # Scoring
    category_weight: float = Field(default=DEFAULT_CATEGORY_WEIGHT, ge=0)
    price_weight: float = Field(default=DEFAULT_PRICE_WEIGHT, ge=0)
    default_top_n: int = Field(default=DEFAULT_TOP_N, ge=1)
    max_top_n: int = Field(default=100, ge=1)

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CARTREC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(category=self.category_weight, price=self.price_weight)


@lru_cache
def get_settings() -> Settings:
    """Cached settings, injectable as a FastAPI dependency."""
    return Settings()
