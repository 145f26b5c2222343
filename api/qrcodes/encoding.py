"""
QR encoding adapter (qrcode + Pillow).

Renders a `GenerationRequest` to a PNG `ImageArtifact`:
- symbol version picked automatically for the payload
- 1-module quiet zone, black on white
- final image `size` px wide (nearest-neighbour scaling so modules stay sharp)

Output is a pure function of the request: no randomness, no PNG metadata.
"""

from __future__ import annotations

import io
import logging

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage

from core.errors import EncodingError

from .domain import GenerationRequest, ImageArtifact

QR_BORDER = 1
QR_FILL_COLOR = "black"
QR_BACK_COLOR = "white"
QR_IMAGE_FORMAT = "PNG"
QR_MEDIA_TYPE = "image/png"

# Scale used when the requested width cannot fit one pixel per module.
FALLBACK_SCALE = 4

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

logger = logging.getLogger(__name__)


def _pixel_width(span: int, requested: int) -> int:
    if requested >= span:
        return requested
    return span * FALLBACK_SCALE


def encode(request: GenerationRequest) -> ImageArtifact:
    level = ERROR_CORRECTION_LEVELS.get(request.error_correction_level)
    if level is None:
        raise EncodingError(f"unsupported error correction level {request.error_correction_level!r}")

    qr = qrcode.QRCode(
        version=None,
        error_correction=level,
        box_size=1,
        border=QR_BORDER,
    )
    try:
        qr.add_data(request.text)
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise EncodingError(
            f"payload of {len(request.text)} chars does not fit level {request.error_correction_level}"
        ) from exc
    except ValueError as exc:
        raise EncodingError(f"encoder rejected payload: {exc}") from exc

    span = qr.modules_count + 2 * QR_BORDER
    width = _pixel_width(span, request.size)

    img = qr.make_image(
        image_factory=PilImage,
        fill_color=QR_FILL_COLOR,
        back_color=QR_BACK_COLOR,
    ).get_image()
    if img.size != (width, width):
        img = img.resize((width, width), Image.Resampling.NEAREST)

    buffer = io.BytesIO()
    img.save(buffer, format=QR_IMAGE_FORMAT)
    logger.debug(
        "qr_encoded version=%s modules=%s width=%s bytes=%s",
        qr.version,
        qr.modules_count,
        width,
        buffer.tell(),
    )
    return ImageArtifact(media_type=QR_MEDIA_TYPE, payload=buffer.getvalue())
