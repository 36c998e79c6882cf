"""
Configuration management for the payslip engine.

Values are read from environment variables (prefix ``PAYSLIP_``) or a
``.env`` file.
"""

from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYSLIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment Settings
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    # Verification code
    verification_base_url: str = Field(
        default="http://localhost:3000",
        description="Origin the verification URL points at",
    )
    verification_error_correction: str = Field(
        default="M", description="QR error correction level (L, M, Q, H)"
    )
    verification_max_version: int = Field(
        default=10, description="Largest QR symbol version a token may need"
    )
    verification_border: int = Field(
        default=1, description="Quiet zone width in modules"
    )

    # Document text
    currency_symbol: str = Field(
        default="", description="Prefix printed before every amount"
    )
    footer_disclaimer: str = (
        "This is a computer-generated payslip. No signature is required."
    )
    footer_attribution: str = "Payslip System - Confidential"
    timestamp_format: str = "%Y-%m-%d %H:%M"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("verification_error_correction", mode="before")
    @classmethod
    def normalize_error_correction(cls, v: str) -> str:
        """Accept lower case levels from the environment."""
        level = str(v).strip().upper()
        if level not in ("L", "M", "Q", "H"):
            raise ValueError("verification_error_correction must be one of L, M, Q, H")
        return level

    @field_validator("verification_max_version", mode="after")
    @classmethod
    def validate_max_version(cls, v: int) -> int:
        if not 1 <= v <= 40:
            raise ValueError("verification_max_version must be between 1 and 40")
        return v

    @field_validator("verification_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()
