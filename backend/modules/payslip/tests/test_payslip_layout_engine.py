import logging
import pytest
from decimal import Decimal

from modules.payslip.enums.payslip_enums import TextAlign
from modules.payslip.schemas.document_schemas import FilledRect, RasterImage, TextRun
from modules.payslip.services.payslip_layout_engine import (
    AMOUNT_RIGHT_EDGE,
    FOOTER_TOP,
    NET_PAY_FILL,
    PAGE_WIDTH_MM,
    QR_SIZE,
    PayslipLayoutEngine,
    format_money,
    format_percentage,
)
from modules.payslip.services.salary_calculator import compute_totals, normalize_payroll_input


def texts(primitives):
    return [p.text for p in primitives if isinstance(p, TextRun)]


def table_labels(primitives):
    """Left-aligned labels from the salary table, top to bottom."""
    start = texts(primitives).index("Salary Breakdown")
    runs = [p for p in primitives if isinstance(p, TextRun)][start + 1:]
    return [r.text for r in runs if r.align == TextAlign.LEFT and r.y < FOOTER_TOP]


class TestPayslipLayoutEngine:
    """Test suite for PayslipLayoutEngine."""

    @pytest.fixture
    def engine(self):
        return PayslipLayoutEngine(currency_symbol="$")

    @pytest.fixture
    def render(self, engine, company_info, verification_bitmap, generated_at):
        def _render(record):
            payroll_input = normalize_payroll_input(record)
            return engine.layout(
                compute_totals(payroll_input),
                payroll_input,
                record.employee,
                company_info,
                verification_bitmap,
                generated_at=generated_at,
            )
        return _render

    def test_row_order(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory(
            allowances={"housing": 200, "transport": 80},
            bonuses={"performance": 150},
            deductions={"insurance": 50, "loan": 25},
        ))

        assert table_labels(primitives) == [
            "Basic Salary",
            "Overtime",
            "housing Allowance",
            "transport Allowance",
            "performance Bonus",
            "Gross Pay",
            "Deductions",
            "insurance",
            "loan",
            "Tax (10%)",
            "Net Pay",
        ]

    def test_empty_maps_produce_fixed_rows(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory(
            overtime_hours="", overtime_rate="", allowances={}, bonuses={}, deductions={},
            tax_percentage="",
        ))

        assert table_labels(primitives) == [
            "Basic Salary", "Overtime", "Gross Pay", "Deductions", "Tax (0%)", "Net Pay",
        ]

    def test_amounts_formatted_and_right_aligned(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory(basic_salary="12500.5"))
        amounts = [p for p in primitives if isinstance(p, TextRun) and p.align == TextAlign.RIGHT]

        assert all(a.x == AMOUNT_RIGHT_EDGE for a in amounts)
        assert [a.text for a in amounts] == [
            "$12,500.50",   # basic salary
            "$50.00",       # overtime
            "$200.00",      # housing
            "$12,750.50",   # gross
            "-$50.00",      # insurance
            "-$1,275.05",   # tax
            "$11,425.45",   # net
        ]

    def test_rows_advance_downwards(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory(allowances={"a": 1, "b": 2, "c": 3}))
        start = texts(primitives).index("Salary Breakdown")
        ys = [p.y for p in primitives if isinstance(p, TextRun) and p.align == TextAlign.LEFT][start + 1:]
        table_ys = [y for y in ys if y < FOOTER_TOP]

        assert table_ys == sorted(table_ys)
        assert len(set(table_ys)) == len(table_ys)

    def test_net_pay_band(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory())
        band = [p for p in primitives if isinstance(p, FilledRect) and p.color == NET_PAY_FILL]
        net_label = next(p for p in primitives if isinstance(p, TextRun) and p.text == "Net Pay")
        gross_label = next(p for p in primitives if isinstance(p, TextRun) and p.text == "Gross Pay")

        assert len(band) == 1
        assert band[0].y < net_label.y < band[0].y + band[0].height
        assert net_label.bold and net_label.font_size > gross_label.font_size
        assert gross_label.bold

    def test_header_and_verification_image(self, render, payslip_record_factory, verification_bitmap):
        primitives = render(payslip_record_factory())
        images = [p for p in primitives if isinstance(p, RasterImage)]

        assert isinstance(primitives[0], FilledRect)
        assert primitives[0].y == 0 and primitives[0].width == PAGE_WIDTH_MM
        assert len(images) == 1
        assert images[0].bitmap == verification_bitmap
        assert images[0].width == images[0].height == QR_SIZE
        assert images[0].x + images[0].width < PAGE_WIDTH_MM
        assert images[0].y < primitives[0].height
        assert "TechXplo Ltd" in texts(primitives)
        assert "12 Harbour Road, Springfield" in texts(primitives)

    def test_title_and_footer(self, render, payslip_record_factory):
        lines = texts(render(payslip_record_factory()))

        assert "PAYSLIP" in lines
        assert "Payment Date: 2025-01-31" in lines
        assert "Generated on 2025-02-01 09:30" in lines
        assert lines[-3] == "This is a computer-generated payslip. No signature is required."
        assert lines[-1] == "Payslip System - Confidential"

    def test_employee_panel_with_all_fields(self, render, payslip_record_factory):
        lines = texts(render(payslip_record_factory()))

        for expected in (
            "Name: Jordan Lee",
            "Employee ID: EMP-001",
            "Department: Engineering",
            "Designation: Software Engineer",
            "Email: jordan.lee@example.com",
            "Phone: +1 555 0100",
            "Bank: First National",
            "Account: 000123456789",
            "Tax Number: TX-998877",
        ):
            assert expected in lines

    def test_missing_optional_fields_omitted(self, render, payslip_record_factory, minimal_employee_info):
        lines = texts(render(payslip_record_factory(employee=minimal_employee_info)))

        assert not any(line.startswith(("Phone:", "Bank:", "Account:", "Tax Number:")) for line in lines)
        assert all(line.strip() for line in lines)

    def test_same_input_same_primitives(self, render, payslip_record_factory):
        record = payslip_record_factory(bonuses={"performance": "99.99"})

        assert render(record) == render(record)

    def test_overflow_logs_warning(self, render, payslip_record_factory, caplog):
        many = {f"item{i}": 10 for i in range(30)}

        with caplog.at_level(logging.WARNING):
            primitives = render(payslip_record_factory(allowances=many))

        assert "not reflowed" in caplog.text
        assert texts(primitives).count("Net Pay") == 1

    def test_default_form_fits_without_warning(self, render, payslip_record_factory, caplog):
        with caplog.at_level(logging.WARNING):
            render(payslip_record_factory(
                allowances={"housing": 200, "transport": 100, "medical": 50},
                bonuses={"performance": 300},
                deductions={"insurance": 50, "loan": 100},
            ))

        assert "not reflowed" not in caplog.text

    def test_negative_deduction_single_sign(self, render, payslip_record_factory):
        primitives = render(payslip_record_factory(deductions={"refund": -10}, tax_percentage=0))
        amounts = [p.text for p in primitives if isinstance(p, TextRun) and p.align == TextAlign.RIGHT]

        assert "$10.00" in amounts
        assert not any(a.startswith("--") for a in amounts)

    def test_huge_amounts_render(self, render, payslip_record_factory):
        biggest = "9" * 16
        primitives = render(payslip_record_factory(
            basic_salary="1" + "0" * 15, overtime_hours=biggest, overtime_rate=biggest, tax_percentage=biggest,
        ))

        assert "Net Pay" in texts(primitives)
        assert "$1,000,000,000,000,000.00" in texts(primitives)

    def test_zero_decimal_currency(self, engine, payslip_record_factory, company_info, verification_bitmap):
        record = payslip_record_factory(basic_salary="250000")
        payroll_input = normalize_payroll_input(record)
        primitives = engine.layout(
            compute_totals(payroll_input),
            payroll_input,
            record.employee,
            company_info.model_copy(update={"currency": "JPY"}),
            verification_bitmap,
        )

        assert "$250,000" in texts(primitives)


class TestFormatting:

    @pytest.mark.parametrize("amount,currency,symbol,expected", [
        (Decimal("1075"), None, "", "1,075.00"),
        (Decimal("1234567.891"), "USD", "$", "$1,234,567.89"),
        (Decimal("0.005"), "EUR", "", "0.01"),
        (Decimal("-450"), None, "$", "-$450.00"),
        (Decimal("-0.001"), None, "", "0.00"),
        (Decimal("1999.5"), "jpy", "", "2,000"),
        (Decimal("1E+26"), None, "", "100,000,000,000,000,000,000,000,000.00"),
        (Decimal("-12345678901234567890123456789.555"), "JPY", "",
         "-12,345,678,901,234,567,890,123,456,790"),
    ])
    def test_format_money(self, amount, currency, symbol, expected):
        assert format_money(amount, currency, symbol) == expected

    @pytest.mark.parametrize("value,expected", [
        (Decimal("10"), "10"),
        (Decimal("12.50"), "12.5"),
        (Decimal("0"), "0"),
        (Decimal("7.25"), "7.25"),
    ])
    def test_format_percentage(self, value, expected):
        assert format_percentage(value) == expected
