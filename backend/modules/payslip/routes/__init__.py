"""Payslip routes module."""

from .payslip_routes import router

__all__ = ["router"]
