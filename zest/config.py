"""Runtime configuration defaults for pricing, persistence and logging."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


DB_PATH = _get_env("ZEST_DB_PATH", "data/zest.db")

CURRENCY = _get_env("ZEST_CURRENCY", "EGP")
VAT_RATE = Decimal(_get_env("ZEST_VAT_RATE", "0.14"))

# Delivery tiers: below the low edge, up to and including the high edge, above it.
DELIVERY_LOW_EDGE = Decimal("100")
DELIVERY_HIGH_EDGE = Decimal("200")
DELIVERY_FEE_SMALL_ORDER = Decimal("35")
DELIVERY_FEE_MEDIUM_ORDER = Decimal("25")
DELIVERY_FEE_LARGE_ORDER = Decimal("15")

LOYALTY_POINT_VALUE = Decimal("10")

EXTRA_CHEESE_PRICE = Decimal("15.00")

DEFAULT_ITEM_IMAGE = "default_item.png"
DEFAULT_RESTAURANT_IMAGE = "default_rest.png"

SHARE_LINK_PREFIX = "zest.group/"
SHARE_TOKEN_BYTES = 16

LOG_DIR = _get_env("ZEST_LOG_DIR", "data/logs")
LOG_LEVEL = _get_env("ZEST_LOG_LEVEL", "INFO")
