"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "cinnamon_erp.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class NumberingSettings(BaseSettings):
    """Document number generation."""

    model_config = SettingsConfigDict(env_prefix="NUMBERING_")

    # "counter": atomic per-type counter row
    # "count": COUNT(*) + 1 over the document table (legacy, race-prone)
    strategy: Literal["counter", "count"] = "counter"


class SalesSettings(BaseSettings):
    """Sales invoice totals configuration."""

    model_config = SettingsConfigDict(env_prefix="SALES_")

    # Subtract per-line discount before summing the invoice subtotal
    apply_line_discount: bool = False


class PurchaseSettings(BaseSettings):
    """Purchase invoice configuration."""

    model_config = SettingsConfigDict(env_prefix="PURCHASE_")

    default_cutting_rate: Decimal = Decimal("250")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Cinnamon ERP"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    numbering: NumberingSettings = Field(default_factory=NumberingSettings)
    sales: SalesSettings = Field(default_factory=SalesSettings)
    purchase: PurchaseSettings = Field(default_factory=PurchaseSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
