"""
Request validation for QR generation.

`validate_generation_request` is pure: raw caller values in, a bounded
`GenerationRequest` out, or a `ValidationError` listing every bad field.
"""

from __future__ import annotations

import math
import re
from typing import Any

from core.config import QRCodeLimits
from core.errors import ValidationError

from .domain import GenerationRequest, QRRecord

_INT_RE = re.compile(r"[+-]?\d+")


def coerce_int(value: Any) -> int | None:
    """
    Integer view of `value`, or None when it is not numeric.
    Fractional numbers are truncated toward zero.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        raw = value.strip()
        if _INT_RE.fullmatch(raw):
            return int(raw)
        try:
            number = float(raw)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


def _text_errors(text: Any, limits: QRCodeLimits) -> list[str]:
    if text is None or text == "":
        return ["Text is required for QR code generation"]
    if not isinstance(text, str):
        return ["Text must be a string"]
    if len(text) > limits.text_max_length:
        return [f"Text cannot exceed {limits.text_max_length} characters"]
    if "\x00" in text:
        return ["Text cannot contain NUL characters"]
    return []


def _size_error(size: int | None, limits: QRCodeLimits) -> str | None:
    if size is None or size < limits.size_min or size > limits.size_max:
        return f"Size must be between {limits.size_min} and {limits.size_max} pixels"
    return None


def _level_error(level: Any, limits: QRCodeLimits) -> str | None:
    if level not in limits.error_correction_levels:
        return "Invalid error correction level"
    return None


def validate_generation_request(raw: dict[str, Any], limits: QRCodeLimits) -> GenerationRequest:
    errors: list[str] = []

    text = raw.get("text")
    errors.extend(_text_errors(text, limits))

    raw_size = raw.get("size")
    size = limits.default_size if raw_size is None else coerce_int(raw_size)
    size_error = _size_error(size, limits)
    if size_error:
        errors.append(size_error)

    level = raw.get("errorCorrectionLevel")
    if level is None:
        level = limits.default_error_correction
    level_error = _level_error(level, limits)
    if level_error:
        errors.append(level_error)

    if errors:
        raise ValidationError(errors)

    return GenerationRequest(text=text, size=size, error_correction_level=level)


def check_record(record: QRRecord, limits: QRCodeLimits) -> None:
    """
    Re-check a record right before it is persisted.
    """
    errors: list[str] = []
    if not (record.owner_id or "").strip():
        errors.append("Owner is required")
    errors.extend(_text_errors(record.text, limits))
    size_error = _size_error(record.size if isinstance(record.size, int) else None, limits)
    if size_error:
        errors.append(size_error)
    level_error = _level_error(record.error_correction_level, limits)
    if level_error:
        errors.append(level_error)
    if not (record.image_data_url or "").startswith("data:"):
        errors.append("Image artifact is required")
    if errors:
        raise ValidationError(errors)
