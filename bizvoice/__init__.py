"""
bizvoice Core Package

Voice command extraction and business analytics for a small-business
finance dashboard. No UI framework dependencies in this package.
"""

__version__ = "0.1.0"

from bizvoice.models.business import BusinessActivity, BusinessKPI, BusinessMetrics, BusinessTask, CompanyResource, TopProduct
from bizvoice.models.ledger import Product, Transaction
from bizvoice.models.voice import VoiceCommand

__all__ = [
    "Transaction",
    "Product",
    "VoiceCommand",
    "BusinessKPI",
    "BusinessMetrics",
    "TopProduct",
    "BusinessTask",
    "CompanyResource",
    "BusinessActivity",
]
