# backend/modules/payslip/services/document_serializer.py

"""
Document serializer.

Renders drawing primitives to a one-page PDF with ReportLab. The canvas runs in
invariant mode without page compression, so the same primitive list always
produces the same bytes.
"""

from io import BytesIO
from typing import Any, Iterable, List, Optional, Tuple
import logging

from pydantic import TypeAdapter, ValidationError
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..enums.payslip_enums import TextAlign
from ..exceptions import SerializationError
from ..schemas.document_schemas import DrawPrimitive, FilledRect, RasterImage, TextRun
from ..schemas.error_schemas import PayslipErrorCodes
from .payslip_layout_engine import PAGE_HEIGHT_MM, PAGE_WIDTH_MM
from .verification_code_encoder import bitmap_to_image

logger = logging.getLogger(__name__)

# family -> (regular, bold) among the PDF standard fonts
STANDARD_FONTS = {
    "helvetica": ("Helvetica", "Helvetica-Bold"),
    "times": ("Times-Roman", "Times-Bold"),
    "courier": ("Courier", "Courier-Bold"),
}

_primitive_adapter = TypeAdapter(DrawPrimitive)


class DocumentSerializer:
    """Serializes primitive lists into PDF bytes."""

    def __init__(
        self,
        page_width_mm: float = PAGE_WIDTH_MM,
        page_height_mm: float = PAGE_HEIGHT_MM,
        image_scale: int = 8,
    ):
        """
        Args:
            page_width_mm: Page width
            page_height_mm: Page height
            image_scale: Pixels per bitmap module in the embedded image
        """
        self.page_width = page_width_mm * mm
        self.page_height = page_height_mm * mm
        self.image_scale = image_scale

    def serialize(self, primitives: Iterable[Any], title: Optional[str] = None) -> bytes:
        """
        Render primitives, in order, onto a single page.

        Every primitive is validated before anything is drawn.

        Raises:
            SerializationError: a primitive is malformed, references an
                unusable bitmap or font, or rendering fails
        """
        prepared = [self._prepare(index, primitive) for index, primitive in enumerate(primitives)]

        buffer = BytesIO()
        pdf = canvas.Canvas(
            buffer,
            pagesize=(self.page_width, self.page_height),
            invariant=1,
            pageCompression=0,
        )
        if title:
            pdf.setTitle(title)

        try:
            for primitive, resource in prepared:
                self._draw(pdf, primitive, resource)
            pdf.showPage()
            pdf.save()
        except Exception as e:
            raise SerializationError(f"PDF rendering failed: {e}") from e

        data = buffer.getvalue()
        logger.debug("Serialized %d primitives into %d bytes", len(prepared), len(data))
        return data

    def _prepare(self, index: int, primitive: Any) -> Tuple[DrawPrimitive, Any]:
        """Validate one primitive and resolve its font or image."""
        if isinstance(primitive, dict):
            try:
                primitive = _primitive_adapter.validate_python(primitive)
            except ValidationError as e:
                raise SerializationError(
                    f"invalid primitive: {e.errors()[0]['msg']}", index,
                    code=PayslipErrorCodes.INVALID_DATA_FORMAT,
                ) from e

        if isinstance(primitive, FilledRect):
            self._check_color(index, primitive.color)
            return primitive, None

        if isinstance(primitive, TextRun):
            self._check_color(index, primitive.color)
            return primitive, self._resolve_font(index, primitive)

        if isinstance(primitive, RasterImage):
            if primitive.width <= 0 or primitive.height <= 0:
                raise SerializationError(
                    "image must have a positive size", index,
                    code=PayslipErrorCodes.MALFORMED_IMAGE,
                )
            try:
                image = bitmap_to_image(primitive.bitmap, scale=self.image_scale)
            except ValueError as e:
                raise SerializationError(
                    f"malformed bitmap: {e}", index,
                    code=PayslipErrorCodes.MALFORMED_IMAGE,
                ) from e
            return primitive, ImageReader(image.convert("RGB"))

        raise SerializationError(
            f"unsupported primitive type {type(primitive).__name__}", index,
            code=PayslipErrorCodes.INVALID_DATA_FORMAT,
        )

    @staticmethod
    def _resolve_font(index: int, run: TextRun) -> str:
        fonts = STANDARD_FONTS.get(run.font_family.strip().lower())
        if fonts is None:
            raise SerializationError(
                f"unsupported font family {run.font_family!r}", index,
                code=PayslipErrorCodes.UNSUPPORTED_FONT,
            )
        if run.font_size <= 0:
            raise SerializationError(
                "font size must be positive", index,
                code=PayslipErrorCodes.INVALID_DATA_FORMAT,
            )
        return fonts[1] if run.bold else fonts[0]

    @staticmethod
    def _check_color(index: int, color: Tuple[int, int, int]):
        if any(channel < 0 or channel > 255 for channel in color):
            raise SerializationError(
                f"color {color} is outside 0-255", index,
                code=PayslipErrorCodes.INVALID_DATA_FORMAT,
            )

    def _draw(self, pdf: canvas.Canvas, primitive: DrawPrimitive, resource: Any):
        # PDF space has its origin bottom-left, in points
        if isinstance(primitive, FilledRect):
            pdf.setFillColorRGB(*self._rgb(primitive.color))
            pdf.rect(
                primitive.x * mm,
                self.page_height - (primitive.y + primitive.height) * mm,
                primitive.width * mm,
                primitive.height * mm,
                stroke=0,
                fill=1,
            )
        elif isinstance(primitive, TextRun):
            pdf.setFont(resource, primitive.font_size)
            pdf.setFillColorRGB(*self._rgb(primitive.color))
            x = primitive.x * mm
            y = self.page_height - primitive.y * mm
            if primitive.align == TextAlign.RIGHT:
                pdf.drawRightString(x, y, primitive.text)
            else:
                pdf.drawString(x, y, primitive.text)
        elif isinstance(primitive, RasterImage):
            pdf.drawImage(
                resource,
                primitive.x * mm,
                self.page_height - (primitive.y + primitive.height) * mm,
                width=primitive.width * mm,
                height=primitive.height * mm,
            )

    @staticmethod
    def _rgb(color: Tuple[int, int, int]) -> List[float]:
        return [channel / 255 for channel in color]
