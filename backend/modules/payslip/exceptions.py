# backend/modules/payslip/exceptions.py

"""
Custom exceptions for payslip module.
"""

from typing import Optional, List
from .schemas.error_schemas import ErrorDetail, PayslipErrorCodes


class PayslipException(Exception):
    """Base exception for payslip module"""
    def __init__(
        self,
        message: str,
        code: str = PayslipErrorCodes.INTERNAL_ERROR,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class PayslipPreconditionError(PayslipException):
    """Required metadata missing before generation starts"""
    def __init__(self, message: str, field: str, code: str):
        super().__init__(
            message=message,
            code=code,
            details=[ErrorDetail(field=field, message=message)],
            status_code=400
        )


class EncodingOverflow(PayslipException):
    """Verification token does not fit the requested QR symbol"""
    def __init__(self, token_length: int, max_version: int, error_correction: str,
                 required_version: Optional[int] = None):
        if required_version:
            message = (
                f"Verification token needs QR version {required_version}, "
                f"maximum is {max_version} at error correction {error_correction}"
            )
        else:
            message = (
                f"Verification token exceeds QR capacity at error correction "
                f"{error_correction}"
            )
        super().__init__(
            message=message,
            code=PayslipErrorCodes.ENCODING_OVERFLOW,
            details=[
                ErrorDetail(
                    field="verification_token",
                    message=f"Token is {token_length} characters long",
                    code="TOKEN_TOO_LONG",
                )
            ],
            status_code=422
        )
        self.token_length = token_length
        self.max_version = max_version
        self.required_version = required_version


class SerializationError(PayslipException):
    """Document could not be serialized; no partial output is produced"""
    def __init__(self, message: str, primitive_index: Optional[int] = None,
                 code: str = PayslipErrorCodes.SERIALIZATION_FAILED):
        details = []
        if primitive_index is not None:
            message = f"Primitive {primitive_index}: {message}"
            details.append(ErrorDetail(field=f"primitives[{primitive_index}]", message=message, code=code))
        super().__init__(
            message=message,
            code=PayslipErrorCodes.SERIALIZATION_FAILED,
            details=details,
            status_code=500
        )
        self.primitive_index = primitive_index
