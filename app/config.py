# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Every tunable of the marketplace: Supabase, JWT, CORS, Redis, Stripe,
# SMTP, the fee split, shipping rules and upload limits.
#
# Values come from the process environment first, then .env.
#
# Usage:
#   from app.config import settings
#   rate = settings.HOMELESS_CONTRIBUTION_RATE
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Marketplace settings. Import the module-level `settings` instance."""

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_ANON_KEY: str | None = Field(
        default=None,
        description="Supabase anon/public API key"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(default="0.0.0.0")

    API_PORT: int = Field(default=5000, ge=1, le=65535)

    FRONTEND_URL: str = Field(
        default="http://localhost:3000",
        description="Public URL of the storefront (used in email links)"
    )

    FRONTEND_DIR: str = Field(
        default="frontend",
        description="Directory with the static storefront pages"
    )

    ARTIST_CMS_DIR: str = Field(
        default="artist-cms",
        description="Directory with the static artist CMS pages"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing access/refresh/reset tokens"
    )

    JWT_ALGORITHM: str = Field(default="HS256")

    ARTIST_TOKEN_EXPIRE_DAYS: int = Field(default=7, ge=1)

    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=30, ge=1)

    CUSTOMER_TOKEN_EXPIRE_DAYS: int = Field(default=30, ge=1)

    RESET_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1)

    MIN_PASSWORD_LENGTH: int = Field(default=8, ge=1)

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str | None = Field(
        default=None,
        description="Stripe secret key; payment intents are skipped when unset"
    )

    CURRENCY: str = Field(default="usd")

    # -------------------------------------------------------------------------
    # Email
    # -------------------------------------------------------------------------

    SMTP_HOST: str | None = Field(
        default=None,
        description="SMTP server; emails are only logged when unset"
    )
    SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    SMTP_USE_TLS: bool = True

    COMPANY_NAME: str = Field(default="Washington Artisan Marketplace")
    COMPANY_EMAIL: str = Field(default="hello@waartisan.com")
    COMPANY_URL: str = Field(default="https://waartisan.com")

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    MARKETPLACE_FEE_RATE: float = Field(default=0.10, ge=0.0, le=1.0)

    HOMELESS_CONTRIBUTION_RATE: float = Field(default=0.05, ge=0.0, le=1.0)

    CONTRIBUTION_BASE: Literal["customer_price", "artist_price"] = Field(
        default="customer_price",
        description="Price the homelessness contribution is computed from"
    )

    TAX_RATE: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Sales tax applied at checkout (Washington state)"
    )

    DEFAULT_PRODUCT_SHIPPING: float = Field(default=8.00, ge=0.0)

    CART_FLAT_SHIPPING: float = Field(default=7.99, ge=0.0)

    FREE_SHIPPING_THRESHOLD: float = Field(default=75.00, ge=0.0)

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum image upload size in MB"
    )

    MAX_IMAGES_PER_UPLOAD: int = Field(default=5, ge=1, le=20)

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpeg,.jpg,.png,.gif,.webp",
        description="Allowed image extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_EXTENSIONS string into a list.

        Example: ".jpg, .png" -> [".jpg", ".png"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def payments_enabled(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.SMTP_HOST)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Parse and validate the environment once per process."""
    return Settings()


settings = get_settings()
