"""
Process configuration.

Settings are read from environment variables once per process. Secrets
(token signing secret, payment gateway key) must come from the
environment; nothing secret is baked into the code.
"""

from __future__ import annotations

import logging
import os
import secrets
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


class Settings(BaseModel):
    data_dir: Path = DEFAULT_DATA_DIR
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 8
    stripe_secret_key: Optional[str] = None
    stripe_api_base: str = "https://api.stripe.com/v1"
    checkout_currency: str = "ron"
    # Minor units (19.99 RON)
    checkout_shipping_amount: int = 1999
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",")]
    return [o for o in origins if o] or ["*"]


def load_settings() -> Settings:
    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        logger.warning(
            "JWT_SECRET is not set; using a random secret. "
            "Issued tokens will not survive a restart."
        )
        jwt_secret = secrets.token_urlsafe(32)

    return Settings(
        data_dir=Path(os.getenv("BOOKSTORE_DATA_DIR") or DEFAULT_DATA_DIR),
        jwt_secret=jwt_secret,
        jwt_expire_hours=int(os.getenv("JWT_EXPIRE_HOURS", "8")),
        stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or None,
        stripe_api_base=os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1"),
        checkout_currency=os.getenv("CHECKOUT_CURRENCY", "ron"),
        checkout_shipping_amount=int(os.getenv("CHECKOUT_SHIPPING_AMOUNT", "1999")),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
