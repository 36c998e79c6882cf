from enum import Enum


class LineItemKind(str, Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"


class ErrorCorrectionLevel(str, Enum):
    """QR error correction levels, lowest to highest redundancy."""
    LOW = "L"
    MEDIUM = "M"
    QUARTILE = "Q"
    HIGH = "H"


class TextAlign(str, Enum):
    LEFT = "left"
    RIGHT = "right"
