"""
QR code API schemas (request models).

Fields are deliberately loose: bounds and coercion live in `validation.py`
so every failure comes back as one message list. Unknown fields (including
any attempt to pass an owner) are dropped.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from core.errors import ValidationError


class GenerateQRCodeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    text: Any = None
    size: Any = None
    error_correction_level: Any = Field(default=None, alias="errorCorrectionLevel")

    def to_raw(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


async def read_generate_request(request: Request) -> GenerateQRCodeRequest:
    body = await request.body()
    if not body.strip():
        return GenerateQRCodeRequest()
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(["Request body must be valid JSON"]) from exc
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])
    return GenerateQRCodeRequest.model_validate(data)
