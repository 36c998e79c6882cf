"""
Drawing primitives exchanged between the layout engine and the serializer.

Coordinates are millimetres on the page, origin top-left, y growing down.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Tuple, Union
from ..enums.payslip_enums import TextAlign

RGB = Tuple[int, int, int]


class Bitmap(BaseModel):
    """Square matrix code, quiet zone included. True marks a dark module."""

    model_config = ConfigDict(frozen=True)

    modules: List[List[bool]]

    @property
    def size(self) -> int:
        return len(self.modules)


class FilledRect(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["filled_rect"] = "filled_rect"
    x: float
    y: float
    width: float
    height: float
    color: RGB


class TextRun(BaseModel):
    """Single line of text; ``y`` is the baseline.

    With right alignment ``x`` is the right edge of the run.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["text_run"] = "text_run"
    x: float
    y: float
    text: str
    font_family: str = "Helvetica"
    font_size: float = 10
    bold: bool = False
    color: RGB = (0, 0, 0)
    align: TextAlign = TextAlign.LEFT


class RasterImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["raster_image"] = "raster_image"
    x: float
    y: float
    width: float
    height: float
    bitmap: Bitmap


DrawPrimitive = Annotated[
    Union[FilledRect, TextRun, RasterImage], Field(discriminator="kind")
]
