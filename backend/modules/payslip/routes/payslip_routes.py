# backend/modules/payslip/routes/payslip_routes.py

"""
Payslip endpoints.

- Live totals preview, called by the form after every field change
- PDF download of a generated payslip
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from datetime import datetime
from urllib.parse import quote
import re
import logging

from ..exceptions import PayslipException
from ..schemas.error_schemas import ErrorResponse, PayslipErrorCodes
from ..schemas.payslip_schemas import (
    PayrollFields,
    PayslipDocumentRequest,
    PayslipPreviewResponse,
)
from ..services.payslip_document_service import PayslipDocumentService, payslip_filename
from ..services.salary_calculator import compute_totals, find_input_warnings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payslips", tags=["Payslips"])


def get_document_service() -> PayslipDocumentService:
    return PayslipDocumentService()


def content_disposition(filename: str) -> str:
    """Attachment header; names that are not plain tokens also get an RFC 5987 ``filename*``."""
    encoded = quote(filename, safe="")
    if encoded == filename:
        return f"attachment; filename={filename}"
    fallback = re.sub(r"[^A-Za-z0-9._-]", "_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _raise_payslip_error(error: PayslipException):
    raise HTTPException(
        status_code=error.status_code,
        detail=ErrorResponse(
            error=type(error).__name__,
            message=error.message,
            code=error.code,
            details=error.details or None,
        ).model_dump(mode="json"),
    ) from error


@router.post("/preview", response_model=PayslipPreviewResponse)
async def preview_totals(fields: PayrollFields):
    """
    Compute payslip totals for the current form state.

    Blank or unparseable amounts count as zero; they, negative amounts and tax
    percentages outside 0-100 are listed in ``warnings``.
    """
    return PayslipPreviewResponse(
        totals=compute_totals(fields),
        warnings=find_input_warnings(fields),
    )


@router.post(
    "/document",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def download_payslip_document(
    request: PayslipDocumentRequest,
    service: PayslipDocumentService = Depends(get_document_service),
):
    """
    Generate the payslip PDF.

    ## Error Responses
    - **400**: Employee or company settings missing
    - **422**: Verification code does not fit, or invalid request body
    - **500**: Document could not be rendered
    """
    try:
        document = await run_in_threadpool(
            service.generate_document, request.payslip, request.company
        )
    except PayslipException as e:
        _raise_payslip_error(e)
    except Exception as e:
        logger.exception("Unexpected failure generating payslip %s", request.payslip.id)
        raise HTTPException(
            status_code=500,
            detail=ErrorResponse(
                error="GenerationError",
                message=f"Failed to generate payslip: {str(e)}",
                code=PayslipErrorCodes.INTERNAL_ERROR,
            ).model_dump(mode="json"),
        )

    filename = payslip_filename(
        request.payslip.employee.employee_id, request.payslip.payment_date
    )
    return Response(
        content=document,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.get("/health")
async def payslip_health_check():
    """
    Health check endpoint for payslip module.

    Returns:
        dict: Health status of payslip module
    """
    return {
        "status": "healthy",
        "module": "payslip",
        "timestamp": datetime.utcnow().isoformat(),
    }
