# backend/modules/payslip/services/verification_code_encoder.py

"""
Verification code encoder.

Encodes the payslip verification URL as a QR code bitmap. The same token and
options always give the same bitmap.
"""

from typing import Optional
from urllib.parse import quote

import qrcode
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field
from qrcode.exceptions import DataOverflowError

from ..enums.payslip_enums import ErrorCorrectionLevel
from ..exceptions import EncodingOverflow
from ..schemas.document_schemas import Bitmap

ERROR_CORRECTION_CONSTANTS = {
    ErrorCorrectionLevel.LOW: qrcode.constants.ERROR_CORRECT_L,
    ErrorCorrectionLevel.MEDIUM: qrcode.constants.ERROR_CORRECT_M,
    ErrorCorrectionLevel.QUARTILE: qrcode.constants.ERROR_CORRECT_Q,
    ErrorCorrectionLevel.HIGH: qrcode.constants.ERROR_CORRECT_H,
}


class VerificationCodeOptions(BaseModel):
    """Symbol constraints for the verification code."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(
        10, ge=1, le=40,
        description="Largest QR version allowed; version v is 17 + 4v modules wide"
    )
    error_correction: ErrorCorrectionLevel = ErrorCorrectionLevel.MEDIUM
    border: int = Field(1, ge=0, description="Quiet zone width in modules")

    @classmethod
    def from_settings(cls, settings) -> "VerificationCodeOptions":
        return cls(
            size=settings.verification_max_version,
            error_correction=ErrorCorrectionLevel(settings.verification_error_correction),
            border=settings.verification_border,
        )


def build_verification_url(payslip_id, base_url: str) -> str:
    """URL a scanner lands on: ``<base-origin>/payslip/view/<payslip-id>``."""
    return f"{base_url.rstrip('/')}/payslip/view/{quote(str(payslip_id), safe='')}"


def encode(token: str, options: Optional[VerificationCodeOptions] = None) -> Bitmap:
    """
    Encode a verification token as a QR bitmap.

    The smallest symbol version that holds the token is used.

    Raises:
        EncodingOverflow: token needs a version above ``options.size`` or
            exceeds QR capacity at the chosen error correction level
    """
    options = options or VerificationCodeOptions()
    level = options.error_correction.value

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION_CONSTANTS[options.error_correction],
        box_size=1,
        border=options.border,
    )
    qr.add_data(token)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        # qrcode 8 reports "Invalid version (was 41, ...)" as ValueError
        raise EncodingOverflow(len(token), options.size, level) from exc

    if qr.version > options.size:
        raise EncodingOverflow(len(token), options.size, level, required_version=qr.version)

    return Bitmap(modules=[[bool(cell) for cell in row] for row in qr.get_matrix()])


def bitmap_to_image(bitmap: Bitmap, scale: int = 1) -> Image.Image:
    """
    Render a bitmap as a greyscale Pillow image, ``scale`` pixels per module.

    Raises:
        ValueError: bitmap is empty or not square
    """
    size = bitmap.size
    if size == 0:
        raise ValueError("bitmap has no rows")
    for row_index, row in enumerate(bitmap.modules):
        if len(row) != size:
            raise ValueError(
                f"bitmap row {row_index} has {len(row)} modules, expected {size}"
            )
    if scale < 1:
        raise ValueError("scale must be at least 1")

    img = Image.new("L", (size, size), 255)
    img.putdata([0 if dark else 255 for row in bitmap.modules for dark in row])
    if scale > 1:
        img = img.resize((size * scale, size * scale), Image.Resampling.NEAREST)
    return img
