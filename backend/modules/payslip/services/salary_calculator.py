# backend/modules/payslip/services/salary_calculator.py

"""
Salary calculator.

Turns raw payroll fields into PayrollTotals. Everything here is pure: the UI
calls compute_totals() after every field change rather than patching totals
incrementally.

Blank-to-zero coercion happens in exactly one place, normalize_payroll_input().
A blank, unparseable or out-of-range number silently counts as zero;
find_input_warnings() is the only way to see that it happened.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..enums.payslip_enums import LineItemKind
from ..schemas.payslip_schemas import (
    LineItem,
    PayrollFields,
    PayrollInput,
    PayrollTotals,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Amounts of 10**16 and above are treated as unparseable. This keeps every
# product and sum far inside the decimal exponent range.
MAX_AMOUNT_EXPONENT = 15

SCALAR_FIELDS = ("basic_salary", "overtime_hours", "overtime_rate", "tax_percentage")
MAP_FIELDS = (
    ("allowances", LineItemKind.EARNING),
    ("bonuses", LineItemKind.EARNING),
    ("deductions", LineItemKind.DEDUCTION),
)

PayrollSource = Union[PayrollInput, PayrollFields, Mapping[str, Any]]


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse(value: Any) -> Tuple[Decimal, Optional[str]]:
    """Return (amount, problem). Blank input parses as zero with no problem."""
    if is_blank(value):
        return ZERO, None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # str() keeps the short repr, so 0.1 stays 0.1 instead of its binary expansion
        result = Decimal(str(value))
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO, "is not a number"

    if not result.is_finite():
        return ZERO, "is not a number"
    if result and result.adjusted() > MAX_AMOUNT_EXPONENT:
        return ZERO, "is out of range"
    return result, None


def to_decimal(value: Any) -> Decimal:
    """Coerce a raw numeric field to Decimal; blank or unparseable becomes zero."""
    return _parse(value)[0]


def _line_items(entries: Mapping[str, Any], kind: LineItemKind) -> List[LineItem]:
    # dict order is insertion order, which drives the document row order
    return [
        LineItem(label=label, amount=to_decimal(raw), kind=kind)
        for label, raw in entries.items()
        if not is_blank(raw)
    ]


def _as_fields(record: Union[PayrollFields, Mapping[str, Any]]) -> PayrollFields:
    if isinstance(record, PayrollFields):
        return record
    return PayrollFields.model_validate(dict(record))


def normalize_payroll_input(record: PayrollSource) -> PayrollInput:
    """
    Build a PayrollInput from raw fields.

    Scalar fields that are blank or unparseable become zero. Map entries with a
    blank value are dropped; non-blank unparseable entries stay as zero-valued
    line items so they remain visible on the document.
    """
    if isinstance(record, PayrollInput):
        return record

    fields = _as_fields(record)
    return PayrollInput(
        basic_salary=to_decimal(fields.basic_salary),
        overtime_hours=to_decimal(fields.overtime_hours),
        overtime_rate=to_decimal(fields.overtime_rate),
        allowances=_line_items(fields.allowances, LineItemKind.EARNING),
        bonuses=_line_items(fields.bonuses, LineItemKind.EARNING),
        deductions=_line_items(fields.deductions, LineItemKind.DEDUCTION),
        tax_percentage=to_decimal(fields.tax_percentage),
        payment_date=fields.payment_date,
    )


def _sum(items: Iterable[LineItem]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def compute_totals(payroll_input: PayrollSource) -> PayrollTotals:
    """
    Compute payslip totals.

    No rounding is applied; presentation rounds. Negative amounts and tax
    percentages outside 0-100 are used as given.

    Args:
        payroll_input: PayrollInput, or raw fields which are normalized first

    Returns:
        PayrollTotals where net_pay == gross_pay - total_deductions exactly
    """
    data = normalize_payroll_input(payroll_input)

    overtime_pay = data.overtime_hours * data.overtime_rate
    gross_pay = (
        data.basic_salary
        + overtime_pay
        + _sum(data.allowances)
        + _sum(data.bonuses)
    )
    tax_amount = gross_pay * data.tax_percentage / HUNDRED
    total_deductions = _sum(data.deductions) + tax_amount
    net_pay = gross_pay - total_deductions

    return PayrollTotals(
        overtime_pay=overtime_pay,
        gross_pay=gross_pay,
        tax_amount=tax_amount,
        total_deductions=total_deductions,
        net_pay=net_pay,
    )


def find_input_warnings(record: Union[PayrollFields, Mapping[str, Any]]) -> List[str]:
    """
    Report inputs the calculator accepts but a reviewer should look at.

    Covers unparseable or out-of-range numbers (counted as zero), negative
    amounts and tax percentages outside 0-100. Totals are never affected.
    """
    fields = _as_fields(record)
    warnings = []

    def check(name: str, raw: Any):
        amount, problem = _parse(raw)
        if problem:
            warnings.append(f"{name}: {raw!r} {problem} and was treated as 0")
        elif amount < ZERO:
            warnings.append(f"{name}: negative amount {amount}")
        return amount

    for name in SCALAR_FIELDS:
        amount = check(name, getattr(fields, name))
        if name == "tax_percentage" and amount > HUNDRED:
            warnings.append(f"tax_percentage: {amount} is above 100")

    for map_name, _kind in MAP_FIELDS:
        for label, raw in getattr(fields, map_name).items():
            if not is_blank(raw):
                check(f"{map_name}.{label}", raw)

    return warnings
