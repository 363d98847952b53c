"""Gateway configuration.

All process-wide settings are collected once into an immutable GatewayConfig and passed
into the pipeline at construction time.

Environment variables:
- SUPABASE_URL, or SUPABASE_PROJECT_ID / VITE_SUPABASE_PROJECT_ID (-> https://<id>.supabase.co)
- SUPABASE_ANON_KEY / VITE_SUPABASE_ANON_KEY
- BASE_URL (public origin used in og:url and the client redirect; default: rebuilt from request)
- PRODUCT_NAME (default: Contact AI)
- OG_CACHE_MAX_AGE (default 3600), OG_FALLBACK_CACHE_MAX_AGE (default 300)
- PROFILE_STORE_TIMEOUT (seconds, default 3.0)
- CRAWLER_SIGNATURES, RESERVED_PROFILE_IDS (comma-separated overrides)
- LOG_LEVEL (default INFO)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx

from app.services.crawler_detection import DEFAULT_CRAWLER_SIGNATURES


DEFAULT_PRODUCT_NAME = "Contact AI"
DEFAULT_RESERVED_IDS: Tuple[str, ...] = ("myclik", "health", "favicon.ico", "robots.txt")


@dataclass(frozen=True)
class GatewayConfig:
    product_name: str = DEFAULT_PRODUCT_NAME
    fallback_description: str = DEFAULT_PRODUCT_NAME
    crawler_signatures: Tuple[str, ...] = DEFAULT_CRAWLER_SIGNATURES
    reserved_ids: Tuple[str, ...] = DEFAULT_RESERVED_IDS
    cache_max_age: int = 3600
    fallback_cache_max_age: int = 300
    store_timeout: float = 3.0
    public_base_url: Optional[str] = None
    store_url: Optional[str] = None
    store_key: Optional[str] = None
    log_level: str = "INFO"

    @property
    def store_configured(self) -> bool:
        return bool(self.store_url and self.store_key)

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build the configuration from the environment, loading .env first if present."""
        _load_env_from_file()

        product_name = os.getenv("PRODUCT_NAME") or DEFAULT_PRODUCT_NAME
        base_url = os.getenv("BASE_URL") or None
        return cls(
            product_name=product_name,
            fallback_description=product_name,
            crawler_signatures=_csv_env("CRAWLER_SIGNATURES") or DEFAULT_CRAWLER_SIGNATURES,
            reserved_ids=_csv_env("RESERVED_PROFILE_IDS") or DEFAULT_RESERVED_IDS,
            cache_max_age=_int_env("OG_CACHE_MAX_AGE", 3600),
            fallback_cache_max_age=_int_env("OG_FALLBACK_CACHE_MAX_AGE", 300),
            store_timeout=_float_env("PROFILE_STORE_TIMEOUT", 3.0),
            public_base_url=base_url.rstrip("/") if base_url else None,
            store_url=_store_url_from_env(),
            store_key=os.getenv("SUPABASE_ANON_KEY") or os.getenv("VITE_SUPABASE_ANON_KEY") or None,
            log_level=_log_level_from_env(),
        )


def _store_url_from_env() -> Optional[str]:
    url = os.getenv("SUPABASE_URL")
    if url:
        url = url.rstrip("/")
    else:
        project_id = os.getenv("SUPABASE_PROJECT_ID") or os.getenv("VITE_SUPABASE_PROJECT_ID")
        if not project_id:
            return None
        url = f"https://{project_id}.supabase.co"
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError) as exc:
        raise RuntimeError(f"SUPABASE_URL / SUPABASE_PROJECT_ID does not form a valid URL: {url!r} ({exc})")
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RuntimeError(f"SUPABASE_URL must be an absolute http(s) URL, got {url!r}")
    return url


def _log_level_from_env() -> str:
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {level!r}")
    return level


def _csv_env(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name) or ""
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer number of seconds, got {raw!r}")
    if value < 0:
        raise RuntimeError(f"{name} must not be negative, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


def _load_env_from_file():
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    """
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    env_path = os.path.join(root_dir, ".env")
    if not os.path.isfile(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            if "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            # Allow space around '=' like KEY = value
            if key and (key not in os.environ or not os.environ[key]):
                os.environ[key] = val
