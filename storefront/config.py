from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]  # project root
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float | None = None) -> float | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    checkout_api_url: str
    coupon_api_url: str
    currency: str
    decimals: int
    http_timeout: float
    host: str
    port: int
    session_cookie: str
    max_pages: int


settings = Settings(
    checkout_api_url=_get_env(
        "CHECKOUT_API_URL", "CHECKOUT_URL", default="http://localhost:3000/api/webhooks"
    ) or "",
    coupon_api_url=_get_env(
        "COUPON_API_URL", "COUPON_URL", default="http://localhost:3000/api/coupons/validate"
    ) or "",
    currency=(_get_env("CURRENCY", default="usd") or "usd").lower(),
    decimals=_get_int("DECIMALS", default=2) or 2,
    http_timeout=_get_float("HTTP_TIMEOUT", default=10.0) or 10.0,
    host=_get_env("HOST", default="127.0.0.1") or "127.0.0.1",
    port=_get_int("PORT", default=8000) or 8000,
    session_cookie=_get_env("SESSION_COOKIE", default="storefront_sid") or "storefront_sid",
    max_pages=_get_int("MAX_PAGES", default=1000) or 1000,
)
