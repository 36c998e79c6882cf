# backend/modules/payslip/tests/conftest.py

"""
Pytest fixtures and factories for payslip module tests.

Provides reusable payslip records, metadata and bitmaps.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.config import Settings
from modules.payslip.schemas.payslip_schemas import CompanyInfo, EmployeeInfo, PayslipRecord
from modules.payslip.schemas.document_schemas import Bitmap
from modules.payslip.services.verification_code_encoder import encode


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        verification_base_url="https://payroll.example.com/",
        verification_error_correction="M",
        verification_max_version=10,
        verification_border=1,
        currency_symbol="$",
    )


@pytest.fixture
def employee_info():
    """Employee with every optional field filled in."""
    return EmployeeInfo(
        employee_id="EMP-001",
        name="Jordan Lee",
        email="jordan.lee@example.com",
        department="Engineering",
        designation="Software Engineer",
        phone="+1 555 0100",
        bank_name="First National",
        bank_account="000123456789",
        tax_number="TX-998877",
    )


@pytest.fixture
def minimal_employee_info():
    """Employee without contact, banking or tax details."""
    return EmployeeInfo(
        employee_id="EMP-002",
        name="Sam Park",
        email="sam.park@example.com",
        department="Finance",
        designation="Analyst",
    )


@pytest.fixture
def company_info():
    return CompanyInfo(
        company_name="TechXplo Ltd",
        company_address="12 Harbour Road, Springfield",
        currency="USD",
        default_tax_rate=Decimal("25"),
    )


@pytest.fixture
def payslip_record_factory(employee_info):
    """Factory for payslip records; defaults match the reference scenario."""
    def create_record(
        id: str = "ps-1001",
        basic_salary: Any = 1000,
        overtime_hours: Any = 10,
        overtime_rate: Any = 5,
        allowances: Optional[Dict[str, Any]] = None,
        bonuses: Optional[Dict[str, Any]] = None,
        deductions: Optional[Dict[str, Any]] = None,
        tax_percentage: Any = 10,
        payment_date: date = date(2025, 1, 31),
        employee: Optional[EmployeeInfo] = employee_info,
    ) -> PayslipRecord:
        return PayslipRecord(
            id=id,
            basic_salary=basic_salary,
            overtime_hours=overtime_hours,
            overtime_rate=overtime_rate,
            allowances={"housing": 200} if allowances is None else allowances,
            bonuses={} if bonuses is None else bonuses,
            deductions={"insurance": 50} if deductions is None else deductions,
            tax_percentage=tax_percentage,
            payment_date=payment_date,
            employee=employee,
        )

    return create_record


@pytest.fixture
def verification_bitmap():
    return encode("https://payroll.example.com/payslip/view/ps-1001")


@pytest.fixture
def generated_at():
    return datetime(2025, 2, 1, 9, 30)


@pytest.fixture
def ragged_bitmap():
    """Bitmap whose rows differ in length."""
    return Bitmap(modules=[[True, False, True], [True, False], [False, True, True]])
