from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from .constants import LOGGER


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a numeric value.")


def load_env(env_path: Path | None = None) -> None:
    env_path = env_path or Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    load_dotenv(env_path, override=True)


def validate_env() -> None:
    required = (
        "MONZO_CLIENT_ID",
        "MONZO_CLIENT_SECRET",
        "MONZO_REDIRECT_URL",
    )
    missing = [key for key in required if not os.getenv(key, "").strip()]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    redirect_url = os.getenv("MONZO_REDIRECT_URL", "").strip()
    parsed = urlparse(redirect_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise RuntimeError(
            "MONZO_REDIRECT_URL must be an absolute http(s) URL (for example: "
            "https://example.com/callback)."
        )


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("MONZO_API_DEBUG", "0"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
