"""
Application settings loaded from environment variables.
"""
import logging
import os
from functools import lru_cache
from typing import Optional

import pytz
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Runtime configuration for the API.

    Attributes:
        env: Deployment environment; "local" bypasses token verification
        firebase_credentials_json: Service account JSON content (production)
        firebase_credentials_file: Service account file path (local development)
        timezone: Zone used for sale timestamps and date filters
        partner_owner_name: Product owner tag whose revenue is split out
        trust_client_prices: Charge the prices declared in the request body
        sale_timeout_seconds: Deadline for one checkout transaction
        log_level: Root logging level
    """
    env: str = "production"
    firebase_credentials_json: Optional[str] = None
    firebase_credentials_file: str = "firebase-adminsdk.json"
    timezone: str = "Africa/Cairo"
    partner_owner_name: str = "Sharoofa"
    trust_client_prices: bool = True
    sale_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            env=os.environ.get("ENV", "production"),
            firebase_credentials_json=os.environ.get("FIREBASE_CREDENTIALS_JSON_CONTENT"),
            firebase_credentials_file=os.environ.get("FIREBASE_CREDENTIALS_FILE", "firebase-adminsdk.json"),
            timezone=os.environ.get("APP_TIMEZONE", "Africa/Cairo"),
            partner_owner_name=os.environ.get("PARTNER_OWNER_NAME", "Sharoofa"),
            trust_client_prices=_env_flag("TRUST_CLIENT_PRICES", True),
            sale_timeout_seconds=float(os.environ.get("SALE_TIMEOUT_SECONDS", "10")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
