"""
Offset pagination over a user's QR history, newest first.
"""

from __future__ import annotations

import math
from typing import Any

from core.config import QRCodeLimits

from .domain import PageResult
from .store import QRCodeStore
from .validation import coerce_int

# OFFSET is a signed 64-bit integer on the postgres side.
MAX_OFFSET = 2**63 - 1


def _positive_int(raw: Any) -> int | None:
    value = coerce_int(raw)
    if value is None or value <= 0:
        return None
    return value


def normalize_page_params(page: Any, limit: Any, limits: QRCodeLimits) -> tuple[int, int]:
    """
    Missing, non-numeric or non-positive values fall back to the defaults;
    `limit` is capped at `limits.max_page_limit` and `page` so the row offset
    fits in 64 bits.
    """
    page_n = _positive_int(page) or limits.default_page
    limit_n = max(1, min(_positive_int(limit) or limits.default_page_limit, limits.max_page_limit))
    # Past this page the offset overflows; such pages are empty anyway.
    page_n = min(page_n, MAX_OFFSET // limit_n + 1)
    return max(1, page_n), limit_n


def page_window(page: int, limit: int, total_count: int) -> tuple[int, bool, bool]:
    """
    Returns (total_pages, has_next_page, has_prev_page).
    """
    total_pages = math.ceil(total_count / limit) if total_count > 0 else 0
    return total_pages, page < total_pages, page > 1


async def paginate(
    store: QRCodeStore,
    owner_id: str,
    *,
    page: Any,
    limit: Any,
    limits: QRCodeLimits,
) -> PageResult:
    page_n, limit_n = normalize_page_params(page, limit, limits)
    skip = (page_n - 1) * limit_n
    items, total_count = await store.list_by_owner(owner_id, skip=skip, limit=limit_n)
    total_pages, has_next, has_prev = page_window(page_n, limit_n, total_count)
    return PageResult(
        items=items,
        current_page=page_n,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=has_next,
        has_prev_page=has_prev,
    )
