"""Configuration management using Pydantic Settings"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./vaultswipe.db"
    storage_key: str = "vaultswipe"

    # Service
    service_name: str = "vaultswipe"
    log_level: str = "INFO"

    # Ledger
    default_due_day: int = 1
    card_palette: List[str] = ["#0F766E", "#1D4ED8", "#9333EA", "#B45309", "#065F46"]
    due_soon_days: int = 5
    aggregation_mode: Literal["auto", "pending_sum", "stated_balances"] = "auto"
    seed_demo_data: bool = False  # starter cards on an empty store


settings = Settings()
