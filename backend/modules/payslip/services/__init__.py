"""Payslip services module."""

from .salary_calculator import compute_totals, normalize_payroll_input, find_input_warnings
from .verification_code_encoder import VerificationCodeOptions, encode, build_verification_url
from .payslip_layout_engine import PayslipLayoutEngine
from .document_serializer import DocumentSerializer
from .payslip_document_service import PayslipDocumentService, generate_document, payslip_filename

__all__ = [
    'compute_totals',
    'normalize_payroll_input',
    'find_input_warnings',
    'VerificationCodeOptions',
    'encode',
    'build_verification_url',
    'PayslipLayoutEngine',
    'DocumentSerializer',
    'PayslipDocumentService',
    'generate_document',
    'payslip_filename',
]
