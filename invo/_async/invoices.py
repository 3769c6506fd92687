"""Invoices namespace for the INVO SDK (async)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._files import FileInput, build_file_upload
from .._http import RESPONSE_BYTES
from .._payload import resolve_payload
from ..config import INVOICE_STORE_PATH, MAKEUP_PATH, READER_PATH
from ..types import CreateInvoiceResult

if TYPE_CHECKING:
    from ..types import CreateInvoicePayload, InvoiceMakeupPayload
    from .executor import AsyncRequestExecutor


class AsyncInvoicesNamespace:
    """Async namespace for invoice operations."""

    def __init__(self, executor: AsyncRequestExecutor) -> None:
        self._executor = executor

    async def create(
        self,
        data: CreateInvoicePayload | Any,
        *,
        callback: str | None = None,
    ) -> CreateInvoiceResult:
        """Create and submit a new invoice.

        Args:
            data: Invoice payload (dict or Pydantic model).
            callback: Webhook URL that receives status updates for this invoice.

        Returns:
            CreateInvoiceResult with the new invoice id.
        """
        payload = resolve_payload(data)
        if callback is not None:
            payload["callback"] = callback
        return await self._executor.send(
            INVOICE_STORE_PATH,
            "POST",
            body=payload,
            parse=CreateInvoiceResult.from_dict,
        )

    async def read(
        self,
        file: FileInput,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """Extract invoice data from an uploaded file (PDF, XML, image).

        Args:
            file: Path, raw bytes, or binary file object.
            filename: Name sent with the upload; defaults to the file's name.
            content_type: MIME type of the upload; guessed from the filename.

        Returns:
            Dictionary with the parsed invoice fields.
        """
        files = build_file_upload(file, filename=filename, content_type=content_type)
        return await self._executor.send(READER_PATH, "POST", files=files, content_type=None)

    async def pdf(self, data: InvoiceMakeupPayload | Any) -> bytes:
        """Render a branded invoice PDF.

        Returns:
            The PDF document bytes.
        """
        return await self._executor.send(
            MAKEUP_PATH,
            "POST",
            body=resolve_payload(data),
            response_type=RESPONSE_BYTES,
        )
