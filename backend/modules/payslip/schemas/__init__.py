"""Payslip schemas module."""

from .payslip_schemas import (
    EmployeeInfo,
    CompanyInfo,
    PayrollFields,
    PayslipRecord,
    LineItem,
    PayrollInput,
    PayrollTotals,
    PayslipPreviewResponse,
    PayslipDocumentRequest,
)
from .document_schemas import Bitmap, FilledRect, TextRun, RasterImage, DrawPrimitive

__all__ = [
    'EmployeeInfo',
    'CompanyInfo',
    'PayrollFields',
    'PayslipRecord',
    'LineItem',
    'PayrollInput',
    'PayrollTotals',
    'PayslipPreviewResponse',
    'PayslipDocumentRequest',
    'Bitmap',
    'FilledRect',
    'TextRun',
    'RasterImage',
    'DrawPrimitive',
]
