# backend/modules/payslip/__init__.py

"""
Payslip Module - computation and document rendering

- Salary calculator with explicit blank-to-zero normalization
- QR verification code encoder
- Single-page payslip layout engine
- PDF serializer
- Document generation entry point and HTTP routes
"""

from .routes.payslip_routes import router as payslip_router
from .services.payslip_document_service import generate_document

__version__ = "1.0.0"
__all__ = ["payslip_router", "generate_document"]
