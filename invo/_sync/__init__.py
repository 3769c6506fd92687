"""Sync session and namespace classes for the INVO SDK."""

from .executor import RequestExecutor
from .invoices import InvoicesNamespace
from .session import Session

__all__ = [
    "Session",
    "RequestExecutor",
    "InvoicesNamespace",
]
