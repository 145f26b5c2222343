"""
Owner-scoped access to stored QR codes.

`OwnerScope` is built per request from the verified identity. Its methods take
no owner argument, so a body field can never redirect a read or delete to
another user's records.
"""

from __future__ import annotations

import logging
from typing import Any

from core.config import QRCodeLimits
from core.errors import NotFoundError

from . import pagination
from .domain import PageResult, QRRecord
from .store import QRCodeStore

logger = logging.getLogger(__name__)


class OwnerScope:
    def __init__(self, owner_id: str, *, store: QRCodeStore, limits: QRCodeLimits):
        self.owner_id = owner_id
        self.store = store
        self.limits = limits

    async def get(self, qr_id: Any) -> QRRecord:
        record = await self.store.find_one(qr_id, owner_id=self.owner_id)
        if record is None:
            raise NotFoundError()
        return record

    async def delete(self, qr_id: Any) -> None:
        deleted = await self.store.delete_one(qr_id, owner_id=self.owner_id)
        if not deleted:
            raise NotFoundError()
        logger.info("qr_deleted", extra={"owner_id": self.owner_id, "qr_id": str(qr_id)})

    async def history(self, *, page: Any = None, limit: Any = None) -> PageResult:
        return await pagination.paginate(
            self.store,
            self.owner_id,
            page=page,
            limit=limit,
            limits=self.limits,
        )
