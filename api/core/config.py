"""
Environment-driven settings.

Every value has a working default so the API starts without a `.env` file.
Blank or unparseable env values fall back to the default, and so do
bounds that contradict each other (e.g. a default size outside min/max).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


@dataclass(frozen=True)
class QRCodeLimits:
    """
    Bounds and defaults for QR generation and history paging.
    """

    text_max_length: int = 1000
    size_min: int = 50
    size_max: int = 1000
    default_size: int = 200
    error_correction_levels: tuple[str, ...] = ("L", "M", "Q", "H")
    default_error_correction: str = "M"
    default_page: int = 1
    default_page_limit: int = 20
    max_page_limit: int = 100


def load_limits() -> QRCodeLimits:
    base = QRCodeLimits()
    default_ecl = _env_str("QR_DEFAULT_ERROR_CORRECTION", base.default_error_correction).upper()
    if default_ecl not in base.error_correction_levels:
        default_ecl = base.default_error_correction

    text_max_length = _env_int("QR_TEXT_MAX_LENGTH", base.text_max_length)
    if text_max_length < 1:
        logger.warning("qr_limits_invalid field=text_max_length value=%s", text_max_length)
        text_max_length = base.text_max_length

    size_min = _env_int("QR_SIZE_MIN", base.size_min)
    size_max = _env_int("QR_SIZE_MAX", base.size_max)
    default_size = _env_int("QR_DEFAULT_SIZE", base.default_size)
    if not 1 <= size_min <= default_size <= size_max:
        # Size bounds are only usable together.
        logger.warning(
            "qr_limits_invalid field=size min=%s default=%s max=%s", size_min, default_size, size_max,
        )
        size_min, default_size, size_max = base.size_min, base.default_size, base.size_max

    default_page_limit = _env_int("QR_HISTORY_DEFAULT_LIMIT", base.default_page_limit)
    max_page_limit = _env_int("QR_HISTORY_MAX_LIMIT", base.max_page_limit)
    if not 1 <= default_page_limit <= max_page_limit:
        logger.warning(
            "qr_limits_invalid field=page_limit default=%s max=%s", default_page_limit, max_page_limit,
        )
        default_page_limit, max_page_limit = base.default_page_limit, base.max_page_limit

    return QRCodeLimits(
        text_max_length=text_max_length,
        size_min=size_min,
        size_max=size_max,
        default_size=default_size,
        default_error_correction=default_ecl,
        default_page_limit=default_page_limit,
        max_page_limit=max_page_limit,
    )


def store_backend() -> str:
    return _env_str("QR_STORE_BACKEND", "postgres").lower()


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO")


def log_format() -> str:
    return _env_str("LOG_FORMAT", "json").lower()


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        # Local frontend dev server.
        return ["http://localhost:5173", "http://127.0.0.1:5173"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_limits() -> QRCodeLimits:
    return load_limits()
