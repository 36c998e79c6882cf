# backend/modules/payslip/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "EncodingOverflow",
                "message": "Verification token needs QR version 12, maximum is 10",
                "code": "PAYSLIP_ENCODING_OVERFLOW",
                "details": [
                    {
                        "field": "verification_token",
                        "message": "Token is 310 characters long",
                        "code": "TOKEN_TOO_LONG",
                    }
                ],
                "timestamp": "2025-01-30T12:00:00Z",
            }
        }
    )

    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    request_id: Optional[str] = None


class PayslipErrorCodes:
    """Centralized error codes for payslip module"""

    # Precondition errors
    MISSING_COMPANY_SETTINGS = "PAYSLIP_MISSING_COMPANY_SETTINGS"
    MISSING_EMPLOYEE = "PAYSLIP_MISSING_EMPLOYEE"

    # Verification code errors
    ENCODING_OVERFLOW = "PAYSLIP_ENCODING_OVERFLOW"

    # Document errors
    SERIALIZATION_FAILED = "PAYSLIP_SERIALIZATION_FAILED"
    MALFORMED_IMAGE = "PAYSLIP_MALFORMED_IMAGE"
    UNSUPPORTED_FONT = "PAYSLIP_UNSUPPORTED_FONT"

    # Generic errors
    INVALID_DATA_FORMAT = "PAYSLIP_INVALID_DATA_FORMAT"
    INTERNAL_ERROR = "PAYSLIP_INTERNAL_ERROR"
