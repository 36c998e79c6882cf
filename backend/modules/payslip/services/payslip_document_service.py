# backend/modules/payslip/services/payslip_document_service.py

"""
Payslip document generation service.

Single entry point the surrounding application calls: a payslip record and
company settings go in, PDF bytes come out.
"""

from datetime import date, datetime
from typing import Any, Mapping, Optional, Union
import logging

from core.config import Settings, get_settings
from ..exceptions import PayslipPreconditionError
from ..schemas.error_schemas import PayslipErrorCodes
from ..schemas.payslip_schemas import CompanyInfo, PayslipRecord
from .document_serializer import DocumentSerializer
from .payslip_layout_engine import PayslipLayoutEngine
from .salary_calculator import compute_totals, find_input_warnings, normalize_payroll_input
from .verification_code_encoder import (
    VerificationCodeOptions,
    build_verification_url,
    encode,
)

logger = logging.getLogger(__name__)


def payslip_filename(employee_id: str, payment_date: Union[date, str], ext: str = "pdf") -> str:
    """Download name: ``payslip-<employee-identifier>-<payment-date>.<ext>``."""
    if isinstance(payment_date, date):
        payment_date = payment_date.isoformat()
    return f"payslip-{employee_id}-{payment_date}.{ext}"


class PayslipDocumentService:
    """
    Runs the payslip pipeline: normalize, compute, encode, lay out, serialize.

    Holds no per-request state; each call works on its own values.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        layout_engine: Optional[PayslipLayoutEngine] = None,
        serializer: Optional[DocumentSerializer] = None,
    ):
        self.settings = settings or get_settings()
        self.code_options = VerificationCodeOptions.from_settings(self.settings)
        self.layout_engine = layout_engine or PayslipLayoutEngine.from_settings(self.settings)
        self.serializer = serializer or DocumentSerializer()

    def generate_document(
        self,
        payslip_record: Union[PayslipRecord, Mapping[str, Any]],
        company_settings: Union[CompanyInfo, Mapping[str, Any], None],
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """
        Generate the payslip PDF.

        Args:
            payslip_record: Payslip with embedded employee record
            company_settings: Company metadata
            generated_at: Footer timestamp, defaults to now

        Returns:
            PDF bytes

        Raises:
            PayslipPreconditionError: company or employee metadata missing
            EncodingOverflow: verification URL does not fit the QR symbol
            SerializationError: the document could not be rendered
        """
        record = self._as_record(payslip_record)
        company = self._as_company(company_settings)
        if record.employee is None:
            raise PayslipPreconditionError(
                f"Payslip {record.id} has no employee record",
                field="employee",
                code=PayslipErrorCodes.MISSING_EMPLOYEE,
            )

        logger.info("Generating payslip document %s for employee %s",
                    record.id, record.employee.employee_id)

        warnings = find_input_warnings(record)
        for warning in warnings:
            logger.warning("Payslip %s input: %s", record.id, warning)

        payroll_input = normalize_payroll_input(record)
        totals = compute_totals(payroll_input)

        token = build_verification_url(record.id, self.settings.verification_base_url)
        bitmap = encode(token, self.code_options)

        primitives = self.layout_engine.layout(
            totals,
            payroll_input,
            record.employee,
            company,
            bitmap,
            generated_at=generated_at,
        )
        document = self.serializer.serialize(
            primitives, title=f"Payslip {record.employee.employee_id} {record.payment_date.isoformat()}"
        )

        logger.info("Generated payslip document %s (%d bytes, net pay %s)",
                    record.id, len(document), totals.net_pay)
        return document

    @staticmethod
    def _as_record(payslip_record) -> PayslipRecord:
        if isinstance(payslip_record, PayslipRecord):
            return payslip_record
        return PayslipRecord.model_validate(dict(payslip_record))

    @staticmethod
    def _as_company(company_settings) -> CompanyInfo:
        if company_settings is None:
            raise PayslipPreconditionError(
                "Company settings not found",
                field="company",
                code=PayslipErrorCodes.MISSING_COMPANY_SETTINGS,
            )
        if isinstance(company_settings, CompanyInfo):
            return company_settings
        return CompanyInfo.model_validate(dict(company_settings))


def generate_document(
    payslip_record: Union[PayslipRecord, Mapping[str, Any]],
    company_settings: Union[CompanyInfo, Mapping[str, Any], None],
) -> bytes:
    """Generate a payslip PDF with the application settings."""
    return PayslipDocumentService().generate_document(payslip_record, company_settings)
