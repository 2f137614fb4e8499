"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with .env file support.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # Stripe Configuration
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_api_version: str = "2024-06-20"

    # ShopMy Affiliate API Configuration
    shopmy_brand_dev_key: Optional[str] = None
    shopmy_api_base: str = "https://api.shopmy.us/api"
    affiliate_timeout_seconds: float = 10.0

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    environment: str = "development"
    webhook_path: str = "/api/stripe-webhook"

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def missing_secrets(self) -> List[str]:
        """Names of required secrets that are not configured."""
        required = {
            "stripe_secret_key": self.stripe_secret_key,
            "stripe_webhook_secret": self.stripe_webhook_secret,
            "shopmy_brand_dev_key": self.shopmy_brand_dev_key,
        }
        return [name for name, value in required.items() if not value]


# Create a global settings instance
settings = Settings()
