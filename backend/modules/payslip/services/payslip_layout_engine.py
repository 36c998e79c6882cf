# backend/modules/payslip/services/payslip_layout_engine.py

"""
Payslip layout engine.

Places the payslip on a single A4 page as an ordered list of drawing
primitives. Units are millimetres, origin top-left. Regions, top to bottom:

- header band with company name, address and verification code
- title and payment date
- employee information panel
- salary breakdown table ending in the net pay band
- footer

The page never reflows: a breakdown long enough to reach the footer is drawn
over it and a warning is logged.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import List, Optional, Tuple
import logging

from ..enums.payslip_enums import TextAlign
from ..schemas.document_schemas import (
    Bitmap,
    DrawPrimitive,
    FilledRect,
    RasterImage,
    TextRun,
)
from ..schemas.payslip_schemas import (
    CompanyInfo,
    EmployeeInfo,
    PayrollInput,
    PayrollTotals,
)

logger = logging.getLogger(__name__)

# Page geometry (mm)
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
MARGIN = 20.0
CONTENT_WIDTH = PAGE_WIDTH_MM - 2 * MARGIN
TEXT_INSET = 5.0
AMOUNT_RIGHT_EDGE = PAGE_WIDTH_MM - MARGIN - TEXT_INSET

HEADER_HEIGHT = 40.0
QR_SIZE = 30.0
QR_TOP = 5.0

PANEL_TOP = 80.0
PANEL_MIN_HEIGHT = 60.0
PANEL_ROW_HEIGHT = 8.0
TABLE_GAP = 10.0
TABLE_BAR_HEIGHT = 15.0
LINE_HEIGHT = 6.0
DEDUCTION_INDENT = 5.0

FOOTER_TOP = PAGE_HEIGHT_MM - 25.0
FOOTER_LINE_HEIGHT = 6.0

# Colors
DARK = (31, 41, 55)
WHITE = (255, 255, 255)
PANEL_FILL = (249, 250, 251)
TABLE_BAR_FILL = (59, 130, 246)
NET_PAY_FILL = (34, 197, 94)
MUTED = (107, 114, 128)

# ISO 4217 currencies without minor units
ZERO_DECIMAL_CURRENCIES = frozenset({
    "BIF", "CLP", "DJF", "GNF", "ISK", "JPY", "KMF", "KRW",
    "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF",
})

DEFAULT_DISCLAIMER = "This is a computer-generated payslip. No signature is required."
DEFAULT_ATTRIBUTION = "Payslip System - Confidential"


def currency_precision(currency: Optional[str]) -> int:
    if currency and currency.strip().upper() in ZERO_DECIMAL_CURRENCIES:
        return 0
    return 2


def format_money(amount: Decimal, currency: Optional[str] = None, symbol: str = "") -> str:
    """Grouped thousands at the currency's precision, e.g. ``1,250.00``."""
    places = currency_precision(currency)
    amount = Decimal(amount)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the kept places
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        value = amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{value.copy_abs():,.{places}f}"


def format_percentage(value: Decimal) -> str:
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class PayslipLayoutEngine:
    """
    Builds the primitive list for one payslip page.

    Instances only hold presentation settings, so one engine can serve
    concurrent requests.
    """

    def __init__(
        self,
        currency_symbol: str = "",
        footer_disclaimer: str = DEFAULT_DISCLAIMER,
        footer_attribution: str = DEFAULT_ATTRIBUTION,
        timestamp_format: str = "%Y-%m-%d %H:%M",
    ):
        self.currency_symbol = currency_symbol
        self.footer_disclaimer = footer_disclaimer
        self.footer_attribution = footer_attribution
        self.timestamp_format = timestamp_format

    @classmethod
    def from_settings(cls, settings) -> "PayslipLayoutEngine":
        return cls(
            currency_symbol=settings.currency_symbol,
            footer_disclaimer=settings.footer_disclaimer,
            footer_attribution=settings.footer_attribution,
            timestamp_format=settings.timestamp_format,
        )

    def layout(
        self,
        totals: PayrollTotals,
        payroll_input: PayrollInput,
        employee: EmployeeInfo,
        company: CompanyInfo,
        verification_bitmap: Bitmap,
        generated_at: Optional[datetime] = None,
    ) -> List[DrawPrimitive]:
        """
        Lay out a payslip.

        Args:
            totals: Totals computed from ``payroll_input``
            payroll_input: Normalized input; supplies line items and dates
            employee: Employee metadata
            company: Company metadata
            verification_bitmap: Encoded verification code
            generated_at: Timestamp printed in the footer, defaults to now

        Returns:
            Primitives in drawing order
        """
        generated_at = generated_at or datetime.now()
        primitives: List[DrawPrimitive] = []

        self._header(primitives, company, verification_bitmap)
        self._title(primitives, payroll_input)
        panel_bottom = self._employee_panel(primitives, employee)
        content_bottom = self._salary_table(
            primitives, panel_bottom + TABLE_GAP, totals, payroll_input, company.currency
        )
        self._footer(primitives, generated_at)

        if content_bottom > FOOTER_TOP - TEXT_INSET:
            logger.warning(
                "Payslip breakdown ends at %.1fmm and overlaps the footer at %.1fmm; "
                "single-page layout is not reflowed",
                content_bottom, FOOTER_TOP,
            )
        return primitives

    # Regions

    def _header(self, primitives: List[DrawPrimitive], company: CompanyInfo, bitmap: Bitmap):
        primitives.append(FilledRect(x=0, y=0, width=PAGE_WIDTH_MM, height=HEADER_HEIGHT, color=DARK))
        primitives.append(self._text(MARGIN, 25, company.company_name, 24, bold=True, color=WHITE))
        if company.company_address:
            primitives.append(self._text(MARGIN, 32, company.company_address, 10, color=WHITE))
        primitives.append(RasterImage(
            x=PAGE_WIDTH_MM - QR_SIZE - MARGIN,
            y=QR_TOP,
            width=QR_SIZE,
            height=QR_SIZE,
            bitmap=bitmap,
        ))

    def _title(self, primitives: List[DrawPrimitive], payroll_input: PayrollInput):
        payment_date = payroll_input.payment_date.isoformat() if payroll_input.payment_date else "-"
        primitives.append(self._text(MARGIN, 60, "PAYSLIP", 20, bold=True))
        primitives.append(self._text(MARGIN, 70, f"Payment Date: {payment_date}", 12))

    def _employee_panel(self, primitives: List[DrawPrimitive], employee: EmployeeInfo) -> float:
        """Draw the employee panel and return its bottom edge."""
        left = self._present([
            ("Name", employee.name),
            ("Employee ID", employee.employee_id),
            ("Department", employee.department),
            ("Designation", employee.designation),
            ("Email", employee.email),
            ("Phone", employee.phone),
        ])
        right = self._present([
            ("Bank", employee.bank_name),
            ("Account", employee.bank_account),
            ("Tax Number", employee.tax_number),
        ])

        rows = max(len(left), len(right), 1)
        height = max(PANEL_MIN_HEIGHT, 20 + rows * PANEL_ROW_HEIGHT)
        primitives.append(FilledRect(x=MARGIN, y=PANEL_TOP, width=CONTENT_WIDTH, height=height, color=PANEL_FILL))
        primitives.append(self._text(MARGIN + TEXT_INSET, PANEL_TOP + 15, "Employee Information", 14, bold=True))

        for column_x, lines in ((MARGIN + TEXT_INSET, left), (PAGE_WIDTH_MM / 2 + 10, right)):
            y = PANEL_TOP + 25
            for line in lines:
                primitives.append(self._text(column_x, y, line, 10))
                y += PANEL_ROW_HEIGHT

        return PANEL_TOP + height

    def _salary_table(
        self,
        primitives: List[DrawPrimitive],
        top: float,
        totals: PayrollTotals,
        payroll_input: PayrollInput,
        currency: Optional[str],
    ) -> float:
        """Draw the breakdown table starting at ``top``; return the bottom of the net pay band."""
        label_x = MARGIN + TEXT_INSET

        def money(amount: Decimal) -> str:
            return format_money(amount, currency, self.currency_symbol)

        primitives.append(FilledRect(x=MARGIN, y=top, width=CONTENT_WIDTH, height=TABLE_BAR_HEIGHT, color=TABLE_BAR_FILL))
        primitives.append(self._text(label_x, top + 10, "Salary Breakdown", 12, bold=True, color=WHITE))

        earnings: List[Tuple[str, Decimal]] = [
            ("Basic Salary", payroll_input.basic_salary),
            ("Overtime", totals.overtime_pay),
        ]
        earnings += [(f"{item.label} Allowance", item.amount) for item in payroll_input.allowances]
        earnings += [(f"{item.label} Bonus", item.amount) for item in payroll_input.bonuses]

        y = top + 22
        for label, amount in earnings:
            self._row(primitives, label_x, y, label, money(amount))
            y += LINE_HEIGHT

        self._row(primitives, label_x, y, "Gross Pay", money(totals.gross_pay), bold=True)
        y += 10

        primitives.append(self._text(label_x, y, "Deductions", 10, bold=True))
        y += 7

        deduction_x = label_x + DEDUCTION_INDENT
        for item in payroll_input.deductions:
            self._row(primitives, deduction_x, y, item.label, money(-item.amount))
            y += LINE_HEIGHT

        tax_label = f"Tax ({format_percentage(payroll_input.tax_percentage)}%)"
        self._row(primitives, deduction_x, y, tax_label, money(-totals.tax_amount))
        y += 12

        primitives.append(FilledRect(x=MARGIN, y=y - 5, width=CONTENT_WIDTH, height=15, color=NET_PAY_FILL))
        self._row(primitives, label_x, y + 5, "Net Pay", money(totals.net_pay), bold=True, size=14, color=WHITE)
        return y + 10

    def _footer(self, primitives: List[DrawPrimitive], generated_at: datetime):
        lines = [
            self.footer_disclaimer,
            f"Generated on {generated_at.strftime(self.timestamp_format)}",
            self.footer_attribution,
        ]
        y = FOOTER_TOP
        for line in lines:
            primitives.append(self._text(MARGIN, y, line, 8, color=MUTED))
            y += FOOTER_LINE_HEIGHT

    # Helpers

    @staticmethod
    def _present(fields: List[Tuple[str, Optional[str]]]) -> List[str]:
        return [f"{name}: {value}" for name, value in fields if value]

    def _row(self, primitives, x, y, label, amount, bold=False, size=10, color=DARK):
        primitives.append(self._text(x, y, label, size, bold=bold, color=color))
        primitives.append(self._text(AMOUNT_RIGHT_EDGE, y, amount, size, bold=bold, color=color, align=TextAlign.RIGHT))

    @staticmethod
    def _text(x, y, text, size, bold=False, color=DARK, align=TextAlign.LEFT) -> TextRun:
        return TextRun(x=x, y=y, text=text, font_size=size, bold=bold, color=color, align=align)
