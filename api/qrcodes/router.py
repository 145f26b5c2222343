"""
QR code API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from auth import dependencies as auth_dependencies
from core.config import QRCodeLimits, get_limits

from . import schemas, service
from .access import OwnerScope
from .store import QRCodeStore, get_store

router = APIRouter(prefix="/api/qrcodes")


def get_owner_scope(
    owner_id: str = Depends(auth_dependencies.get_current_owner),
    store: QRCodeStore = Depends(get_store),
    limits: QRCodeLimits = Depends(get_limits),
) -> OwnerScope:
    return OwnerScope(owner_id, store=store, limits=limits)


@router.post("", status_code=status.HTTP_201_CREATED)
async def generate_qr_code(
    request: Request,
    scope: OwnerScope = Depends(get_owner_scope),
) -> dict:
    # Body is read only after identity resolved, so a missing token wins over a bad body.
    payload = await schemas.read_generate_request(request)
    record = await service.generate_qr_code(
        payload.to_raw(),
        owner_id=scope.owner_id,
        store=scope.store,
        limits=scope.limits,
    )
    return {"message": "QR code generated successfully", "qrCode": record.to_response()}


@router.get("/history")
async def qr_code_history(
    # Parsed leniently: junk or non-positive values fall back to defaults.
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    scope: OwnerScope = Depends(get_owner_scope),
) -> dict:
    result = await scope.history(page=page, limit=limit)
    return result.to_response()


@router.get("/{qr_id}")
async def get_qr_code(
    qr_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
) -> dict:
    record = await scope.get(qr_id)
    return {"qrCode": record.to_response()}


@router.delete("/{qr_id}")
async def delete_qr_code(
    qr_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
) -> dict:
    await scope.delete(qr_id)
    return {"message": "QR code deleted successfully"}
