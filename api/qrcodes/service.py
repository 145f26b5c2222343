"""
QR generation pipeline.

Flow:
1) Validate and normalize caller parameters
2) Encode the QR image (worker thread, CPU-bound)
3) Persist the record for the verified owner
"""

from __future__ import annotations

import logging
from typing import Any

from starlette.concurrency import run_in_threadpool

from core.config import QRCodeLimits
from core.errors import EncodingError, StoreError

from . import encoding
from .domain import QRRecord
from .store import QRCodeStore
from .validation import validate_generation_request

logger = logging.getLogger(__name__)


async def generate_qr_code(
    raw: dict[str, Any],
    *,
    owner_id: str,
    store: QRCodeStore,
    limits: QRCodeLimits,
) -> QRRecord:
    request = validate_generation_request(raw, limits)

    try:
        artifact = await run_in_threadpool(encoding.encode, request)
    except EncodingError as exc:
        logger.error(
            "qr_encode_failed size=%s level=%s chars=%s detail=%s",
            request.size,
            request.error_correction_level,
            len(request.text),
            exc.detail,
            extra={"owner_id": owner_id, "error_code": exc.code},
        )
        raise

    record = QRRecord.create(owner_id=owner_id, request=request, artifact=artifact)
    try:
        stored = await store.insert(record)
    except StoreError as exc:
        logger.error(
            "qr_store_failed detail=%s",
            exc.detail,
            extra={"owner_id": owner_id, "error_code": exc.code},
        )
        raise

    logger.info(
        "qr_generated size=%s level=%s",
        stored.size,
        stored.error_correction_level,
        extra={"owner_id": owner_id, "qr_id": stored.id},
    )
    return stored
