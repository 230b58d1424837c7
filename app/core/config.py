"""Application configuration."""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Partner gateway
    gateway_base_url: str = "https://uat.onebanc.ai"
    partner_api_key: str = ""
    use_in_memory_gateway: bool = False
    catalog_file: Optional[str] = None  # YAML catalog for the in-memory gateway

    # Timeouts (seconds)
    request_timeout: float = 30.0
    resource_timeout: float = 60.0

    # Cart
    cgst_rate: Decimal = Decimal("0.025")
    sgst_rate: Decimal = Decimal("0.025")

    # Catalog
    catalog_page_size: int = 10
    top_dish_min_rating: float = 4.0
    top_dish_limit: int = 3

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
