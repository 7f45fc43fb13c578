# storefront/config.py
import os
from functools import lru_cache
from typing import List, Optional

from .errors import ConfigError


PURCHASE_MODES = ("download", "coming_soon")

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings:
    """Runtime configuration read from environment variables."""

    def __init__(
        self,
        stripe_secret_key: Optional[str] = None,
        currency: str = "usd",
        artist_name: str = "CEAZY",
        public_base_url: str = "http://localhost:5000",
        purchase_mode: str = "download",
        seed_on_startup: bool = True,
        log_level: str = "INFO",
    ) -> None:
        self.stripe_secret_key = stripe_secret_key
        self.currency = currency.lower()
        self.artist_name = artist_name
        self.public_base_url = public_base_url.rstrip("/")
        self.purchase_mode = purchase_mode
        self.seed_on_startup = seed_on_startup
        self.log_level = log_level.upper()

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        return cls(
            stripe_secret_key=env.get("STRIPE_SECRET_KEY") or None,
            currency=env.get("STOREFRONT_CURRENCY", "usd"),
            artist_name=env.get("STOREFRONT_ARTIST", "CEAZY"),
            public_base_url=env.get("STOREFRONT_PUBLIC_URL", "http://localhost:5000"),
            purchase_mode=env.get("STOREFRONT_PURCHASE_MODE", "download"),
            seed_on_startup=env.get("STOREFRONT_SEED_ON_STARTUP", "true").strip().lower()
            in _TRUE_VALUES,
            log_level=env.get("STOREFRONT_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        problems: List[str] = []
        if not self.stripe_secret_key:
            problems.append("Missing required Stripe secret: STRIPE_SECRET_KEY")
        if self.purchase_mode not in PURCHASE_MODES:
            problems.append(
                f"Unknown purchase mode {self.purchase_mode!r} "
                f"(expected one of {', '.join(PURCHASE_MODES)})"
            )
        if problems:
            raise ConfigError("; ".join(problems))


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
