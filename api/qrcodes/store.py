"""
QR code persistence.

Two backends share the `QRCodeStore` contract:
- `PostgresQRCodeStore`: raw SQL through `core.db` (asyncpg)
- `InMemoryQRCodeStore`: process-local, for dev runs and tests

Every read and delete filters on `owner_id`. A record owned by someone else
and a malformed id both look exactly like a missing record (None / False).
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID, uuid4

import asyncpg

from core import config, db
from core.config import QRCodeLimits
from core.errors import StoreError

from .domain import QRRecord
from .validation import check_record

logger = logging.getLogger(__name__)

SCHEMA_SQL_TEMPLATE = """
CREATE TABLE IF NOT EXISTS qr_codes (
  id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
  owner_id text NOT NULL CHECK (owner_id <> ''),
  text text NOT NULL,
  size integer NOT NULL CHECK (size BETWEEN {size_min} AND {size_max}),
  error_correction_level char(1) NOT NULL CHECK (error_correction_level IN ('L', 'M', 'Q', 'H')),
  image_data_url text NOT NULL,
  created_at timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS qr_codes_owner_created_idx
  ON qr_codes (owner_id, created_at DESC, id DESC);
"""

_COLUMNS = "id, owner_id, text, size, error_correction_level, image_data_url, created_at"


def schema_sql(limits: QRCodeLimits) -> str:
    return SCHEMA_SQL_TEMPLATE.format(size_min=int(limits.size_min), size_max=int(limits.size_max))


def parse_qr_id(raw: Any) -> UUID | None:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except (TypeError, ValueError, AttributeError):
        return None


class QRCodeStore(Protocol):
    async def insert(self, record: QRRecord) -> QRRecord: ...
    async def find_one(self, qr_id: Any, *, owner_id: str) -> QRRecord | None: ...
    async def delete_one(self, qr_id: Any, *, owner_id: str) -> bool: ...
    async def list_by_owner(self, owner_id: str, *, skip: int, limit: int) -> tuple[list[QRRecord], int]: ...


def _row_to_record(row: dict[str, Any]) -> QRRecord:
    return QRRecord(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        text=str(row["text"]),
        size=int(row["size"]),
        error_correction_level=str(row["error_correction_level"]),
        image_data_url=str(row["image_data_url"]),
        created_at=row["created_at"],
    )


class PostgresQRCodeStore:
    def __init__(self, limits: QRCodeLimits):
        self.limits = limits

    async def ensure_schema(self) -> None:
        await db.execute(schema_sql(self.limits))

    async def insert(self, record: QRRecord) -> QRRecord:
        check_record(record, self.limits)
        qr_id = parse_qr_id(record.id) if record.id is not None else None
        try:
            row = await db.fetch_one(
                f"""
                INSERT INTO qr_codes (id, owner_id, text, size, error_correction_level, image_data_url, created_at)
                VALUES (COALESCE($1, gen_random_uuid()), $2, $3, $4, $5, $6, COALESCE($7, now()))
                RETURNING {_COLUMNS}
                """,
                qr_id,
                record.owner_id,
                record.text,
                record.size,
                record.error_correction_level,
                record.image_data_url,
                record.created_at,
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise StoreError(f"insert failed: {exc}", message="Server error during QR code generation") from exc
        if row is None:
            raise StoreError("insert returned no row", message="Server error during QR code generation")
        return _row_to_record(row)

    async def find_one(self, qr_id: Any, *, owner_id: str) -> QRRecord | None:
        parsed = parse_qr_id(qr_id)
        if parsed is None:
            return None
        try:
            row = await db.fetch_one(
                f"""
                SELECT {_COLUMNS}
                FROM qr_codes
                WHERE id = $1
                  AND owner_id = $2
                """,
                parsed,
                owner_id,
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise StoreError(f"lookup failed: {exc}", message="Server error retrieving QR code") from exc
        return _row_to_record(row) if row is not None else None

    async def delete_one(self, qr_id: Any, *, owner_id: str) -> bool:
        parsed = parse_qr_id(qr_id)
        if parsed is None:
            return False
        try:
            deleted = await db.fetch_val(
                """
                DELETE FROM qr_codes
                WHERE id = $1
                  AND owner_id = $2
                RETURNING id
                """,
                parsed,
                owner_id,
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise StoreError(f"delete failed: {exc}", message="Server error deleting QR code") from exc
        return deleted is not None

    async def list_by_owner(self, owner_id: str, *, skip: int, limit: int) -> tuple[list[QRRecord], int]:
        rows: list[dict[str, Any]] = []
        try:
            # Count and page read one snapshot so items and total agree.
            async with db.transaction(isolation="repeatable_read") as conn:
                total = await db.fetch_val(
                    "SELECT count(*) FROM qr_codes WHERE owner_id = $1", owner_id, conn=conn,
                )
                if skip < int(total or 0):
                    rows = await db.fetch_all(
                        f"""
                        SELECT {_COLUMNS}
                        FROM qr_codes
                        WHERE owner_id = $1
                        ORDER BY created_at DESC, id DESC
                        LIMIT $2
                        OFFSET $3
                        """,
                        owner_id,
                        limit,
                        skip,
                        conn=conn,
                    )
        except (asyncpg.PostgresError, OSError) as exc:
            raise StoreError(f"history failed: {exc}", message="Server error retrieving QR code history") from exc
        return [_row_to_record(r) for r in rows], int(total or 0)


class InMemoryQRCodeStore:
    def __init__(self, limits: QRCodeLimits):
        self.limits = limits
        self._lock = asyncio.Lock()
        # id -> (insertion sequence, record)
        self._records: dict[UUID, tuple[int, QRRecord]] = {}
        self._sequence = itertools.count()

    async def insert(self, record: QRRecord) -> QRRecord:
        check_record(record, self.limits)
        qr_id = parse_qr_id(record.id) if record.id is not None else uuid4()
        if qr_id is None:
            raise StoreError(f"invalid id {record.id!r}", message="Server error during QR code generation")
        stored = replace(
            record,
            id=str(qr_id),
            created_at=record.created_at or datetime.now(timezone.utc),
        )
        async with self._lock:
            if qr_id in self._records:
                raise StoreError(f"duplicate id {qr_id}", message="Server error during QR code generation")
            self._records[qr_id] = (next(self._sequence), stored)
        return stored

    async def find_one(self, qr_id: Any, *, owner_id: str) -> QRRecord | None:
        parsed = parse_qr_id(qr_id)
        if parsed is None:
            return None
        async with self._lock:
            entry = self._records.get(parsed)
        if entry is None or entry[1].owner_id != owner_id:
            return None
        return entry[1]

    async def delete_one(self, qr_id: Any, *, owner_id: str) -> bool:
        parsed = parse_qr_id(qr_id)
        if parsed is None:
            return False
        async with self._lock:
            entry = self._records.get(parsed)
            if entry is None or entry[1].owner_id != owner_id:
                return False
            del self._records[parsed]
        return True

    async def list_by_owner(self, owner_id: str, *, skip: int, limit: int) -> tuple[list[QRRecord], int]:
        async with self._lock:
            owned = [entry for entry in self._records.values() if entry[1].owner_id == owner_id]
        owned.sort(key=lambda entry: (entry[1].created_at, entry[0]), reverse=True)
        page = [record for _, record in owned[skip : skip + limit]]
        return page, len(owned)


_store: QRCodeStore | None = None


def build_store(backend: str, limits: QRCodeLimits) -> QRCodeStore:
    if backend == "memory":
        return InMemoryQRCodeStore(limits)
    if backend == "postgres":
        return PostgresQRCodeStore(limits)
    raise RuntimeError(f"Unknown QR_STORE_BACKEND: {backend!r}")


async def init_store() -> QRCodeStore:
    global _store
    if _store is not None:
        return _store
    backend = config.store_backend()
    store = build_store(backend, config.load_limits())
    if isinstance(store, PostgresQRCodeStore):
        await db.init_pool()
        await store.ensure_schema()
    _store = store
    logger.info("qr_store_ready backend=%s", backend)
    return store


async def close_store() -> None:
    global _store
    if isinstance(_store, PostgresQRCodeStore):
        await db.close_pool()
    _store = None


def get_store() -> QRCodeStore:
    if _store is None:
        raise RuntimeError("QR store is not initialized. Call init_store() on startup.")
    return _store
