"""Application settings for the storefront, read from the environment.

Protean infrastructure (databases, brokers, event store) is configured in
``domain.toml`` next to ``domain.py``. Everything here is shop policy and
web-boundary settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    value = _get_env(*keys)
    return default if value is None else int(value)


def _get_float(*keys: str, default: float) -> float:
    value = _get_env(*keys)
    return default if value is None else float(value)


def _get_bool(*keys: str, default: bool) -> bool:
    value = _get_env(*keys)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    shop_name: str
    free_shipping_threshold: float
    flat_shipping_rate: float
    order_number_prefix: str
    max_cart_quantity: int
    max_allocation_attempts: int
    session_cookie_name: str
    session_max_age: int
    session_cookie_secure: bool
    password_hash_rounds: int
    password_reset_ttl: int
    seed_catalogue: bool


settings = Settings(
    shop_name=_get_env("SHOP_NAME", default="The Wizard's Bag") or "The Wizard's Bag",
    free_shipping_threshold=_get_float("FREE_SHIPPING_THRESHOLD", default=50.0),
    flat_shipping_rate=_get_float("FLAT_SHIPPING_RATE", default=9.99),
    order_number_prefix=_get_env("ORDER_NUMBER_PREFIX", default="WB") or "WB",
    max_cart_quantity=_get_int("MAX_CART_QUANTITY", default=99),
    max_allocation_attempts=_get_int("MAX_ALLOCATION_ATTEMPTS", default=3),
    session_cookie_name=_get_env("SESSION_COOKIE_NAME", default="wb_session") or "wb_session",
    session_max_age=_get_int("SESSION_MAX_AGE", default=24 * 60 * 60),
    session_cookie_secure=_get_bool("SESSION_COOKIE_SECURE", default=False),
    password_hash_rounds=_get_int("PASSWORD_HASH_ROUNDS", default=12),
    password_reset_ttl=_get_int("PASSWORD_RESET_TTL", default=60 * 60),
    seed_catalogue=_get_bool("SEED_CATALOGUE", default=True),
)

if settings.max_allocation_attempts < 1:
    raise RuntimeError("MAX_ALLOCATION_ATTEMPTS must be at least 1")

if not 4 <= settings.password_hash_rounds <= 31:
    raise RuntimeError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
