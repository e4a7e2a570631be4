"""
HTTP clients for the invoice and email collaborator functions.
"""

from .base_client import BaseFunctionsClient
from .email_client import INSTANT_CONFIRMATION, MANUAL_CONFIRMATION, EmailClient
from .invoice_client import InvoiceClient

__all__ = [
    "BaseFunctionsClient",
    "EmailClient",
    "InvoiceClient",
    "INSTANT_CONFIRMATION",
    "MANUAL_CONFIRMATION",
]
