from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional, Union
from decimal import Decimal
from datetime import date
from ..enums.payslip_enums import LineItemKind


# Numeric fields arrive from form state: numbers, numeric strings or blanks.
RawAmount = Optional[Union[Decimal, int, float, str]]


class EmployeeInfo(BaseModel):
    """Employee metadata supplied by the employee store."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    employee_id: str = Field(..., description="Human-facing employee identifier")
    name: str = Field(..., description="Full name")
    email: str = ""
    department: str = ""
    designation: str = ""
    phone: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    tax_number: Optional[str] = None


class CompanyInfo(BaseModel):
    """Company settings supplied by the settings store."""

    model_config = ConfigDict(frozen=True)

    company_name: str
    company_address: str = ""
    currency: Optional[str] = Field(
        None, description="ISO 4217 code, drives amount precision"
    )
    default_tax_rate: Optional[Decimal] = Field(
        None,
        description="Prefills tax_percentage on a new payslip form; never applied by the calculator",
    )


class PayrollFields(BaseModel):
    """Raw payroll fields as entered, before blank-to-zero normalization."""

    basic_salary: RawAmount = None
    overtime_hours: RawAmount = None
    overtime_rate: RawAmount = None
    allowances: Dict[str, RawAmount] = Field(default_factory=dict)
    bonuses: Dict[str, RawAmount] = Field(default_factory=dict)
    deductions: Dict[str, RawAmount] = Field(default_factory=dict)
    tax_percentage: RawAmount = None
    payment_date: Optional[date] = None


class PayslipRecord(PayrollFields):
    """Payslip record as returned by the payslip store."""

    id: str = Field(..., description="Payslip identifier used in the verification URL")
    payment_date: date
    employee: Optional[EmployeeInfo] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class LineItem(BaseModel):
    """A single named earning or deduction."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: Decimal
    kind: LineItemKind


class PayrollInput(BaseModel):
    """Normalized payroll input; every numeric field is a Decimal."""

    model_config = ConfigDict(frozen=True)

    basic_salary: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    allowances: List[LineItem] = Field(default_factory=list)
    bonuses: List[LineItem] = Field(default_factory=list)
    deductions: List[LineItem] = Field(default_factory=list)
    tax_percentage: Decimal = Decimal("0")
    payment_date: Optional[date] = None


class PayrollTotals(BaseModel):
    """Totals derived from a PayrollInput. Never edited directly."""

    model_config = ConfigDict(frozen=True)

    overtime_pay: Decimal
    gross_pay: Decimal
    tax_amount: Decimal
    total_deductions: Decimal
    net_pay: Decimal


class PayslipPreviewResponse(BaseModel):
    totals: PayrollTotals
    warnings: List[str] = Field(default_factory=list)


class PayslipDocumentRequest(BaseModel):
    """Request body for document generation."""

    payslip: PayslipRecord
    company: Optional[CompanyInfo] = Field(
        None, description="Company settings; generation fails without them"
    )
