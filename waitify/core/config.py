import logging
import os
from functools import lru_cache

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DOPPLER_API_URL = "https://api.doppler.com/v3/configs/config/secrets/download"


def _load_doppler_secrets():
    """Load secrets from Doppler API into environment variables.

    Must run BEFORE Settings is instantiated so pydantic can read the env vars.
    """
    token = os.getenv("DOPPLER_TOKEN")
    if not token:
        return

    try:
        import requests
        response = requests.get(
            DOPPLER_API_URL,
            params={"format": "json"},
            auth=(token, ""),
            timeout=30,
        )
        response.raise_for_status()
        secrets = response.json()

        for key, value in secrets.items():
            if key not in os.environ:  # Don't override existing env vars
                os.environ[key] = value

        logger.info(f"Loaded {len(secrets)} secrets from Doppler")
    except Exception as e:
        logger.warning(f"Failed to load Doppler secrets: {e}")


_load_doppler_secrets()


class Settings(BaseSettings):
    environment: str = "development"

    # Supabase
    supabase_url: str = ""
    supabase_publishable_key: str = ""
    supabase_secret_key: str = ""

    # Stripe
    stripe_secret_key: str = ""
    stripe_price_basic: str = "price_basic"
    stripe_price_professional: str = "price_professional"
    stripe_price_enterprise: str = "price_enterprise"

    # Email (Resend)
    resend_api_key: str = ""
    email_from: str = "Waitify <noreply@waitify.app>"

    # Public web app (origin for QR links and checkout redirects)
    web_app_url: str = "http://localhost:5173"

    # Redis (subscription status cache)
    redis_url: str = "redis://localhost:6379/0"
    subscription_cache_ttl: int = 300

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def get_price_ids() -> dict[str, str]:
    """Map plan ids to Stripe price ids."""
    return {
        "basic": settings.stripe_price_basic,
        "professional": settings.stripe_price_professional,
        "enterprise": settings.stripe_price_enterprise,
    }
