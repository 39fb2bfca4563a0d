"""
Faktura settings, read from the environment and an optional .env file.

Each group has its own prefix: STORAGE_, API_, INVOICE_ and PDF_
(e.g. ``INVOICE_PAYMENT_DAYS=20``).
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
    db_name: str = "faktura.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]
    tenant_header: str = "X-Tenant-ID"


class InvoiceSettings(BaseSettings):
    """Defaults applied when assembling new invoices."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_")

    default_currency: str = "SEK"
    default_tax_rate: Decimal = Field(default=Decimal("25"), ge=0, le=100)
    default_language: Literal["sv", "en"] = "sv"
    payment_days: int = Field(default=30, ge=0, le=365)
    payment_terms: str = "30 dagar"

    # Attempts for a create when the store reports a duplicate number
    number_conflict_attempts: int = Field(default=2, ge=1)

    @field_validator("default_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"currency must be a three-letter ISO 4217 code, got {v!r}")
        return code


class PdfSettings(BaseSettings):
    """Invoice PDF rendering configuration."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    footer_text: str = ""
    show_legal_notice: bool = True
    logo_max_width: int = 40
    logo_max_height: int = 20


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Faktura"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    invoice: InvoiceSettings = Field(default_factory=InvoiceSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)

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
