"""Async session and namespace classes for the INVO SDK."""

from .executor import AsyncRequestExecutor
from .invoices import AsyncInvoicesNamespace
from .session import AsyncSession

__all__ = [
    "AsyncSession",
    "AsyncRequestExecutor",
    "AsyncInvoicesNamespace",
]
