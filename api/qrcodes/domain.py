"""
QR code value types.

A `QRRecord` is write-once: it is built from a validated `GenerationRequest`
and an encoded `ImageArtifact`, then only read or deleted.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class GenerationRequest:
    text: str
    size: int
    error_correction_level: str


@dataclass(frozen=True)
class ImageArtifact:
    """
    Raster image plus its media type, stored as a `data:` URL.
    """

    media_type: str
    payload: bytes

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.payload).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


@dataclass(frozen=True)
class QRRecord:
    owner_id: str
    text: str
    size: int
    error_correction_level: str
    image_data_url: str
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def create(cls, *, owner_id: str, request: GenerationRequest, artifact: ImageArtifact) -> QRRecord:
        return cls(
            owner_id=owner_id,
            text=request.text,
            size=request.size,
            error_correction_level=request.error_correction_level,
            image_data_url=artifact.to_data_url(),
        )

    def to_response(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "size": self.size,
            "errorCorrectionLevel": self.error_correction_level,
            "imageArtifact": self.image_data_url,
            "createdAt": self.created_at.isoformat() if self.created_at is not None else None,
        }


@dataclass(frozen=True)
class PageResult:
    items: list[QRRecord] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_count: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False

    def to_response(self) -> dict:
        return {
            "items": [item.to_response() for item in self.items],
            "pagination": {
                "currentPage": self.current_page,
                "totalPages": self.total_pages,
                "totalCount": self.total_count,
                "hasNextPage": self.has_next_page,
                "hasPrevPage": self.has_prev_page,
            },
        }
