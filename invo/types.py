"""Typed payloads and results for the invoice endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, TypedDict

from .exceptions import UnexpectedResponseError


class _InvoiceTaxLineRequired(TypedDict):
    taxRate: float
    baseAmount: float
    taxAmount: float


class InvoiceTaxLine(_InvoiceTaxLineRequired, total=False):
    """One VAT/IGIC/IPSI line of an invoice."""

    taxType: Literal["01", "02", "03", "04"]
    surchargeAmount: float
    surchargeRate: float
    taxExemptionReason: Literal["E1", "E2", "E3", "E4", "E5", "E6"]
    regimeKey: str


class _CreateInvoiceRequired(TypedDict):
    issueDate: str
    invoiceNumber: str
    totalAmount: float
    taxLines: List[InvoiceTaxLine]


class CreateInvoicePayload(_CreateInvoiceRequired, total=False):
    """Body of POST /invoice/store."""

    externalId: str
    customerName: str
    customerTaxId: str
    emitterName: str
    emitterTaxId: str
    description: str
    callback: str


class MakeupParty(TypedDict, total=False):
    name: str
    cif: str
    address: str
    phone: str
    email: str


class MakeupBranding(TypedDict, total=False):
    logo: str
    favicon: str
    accent_color: str
    foreground_color: str


class InvoiceMakeupPayload(TypedDict, total=False):
    """Body of POST /makeup (PDF rendering)."""

    id: str
    date: str
    branding: MakeupBranding
    client: MakeupParty
    business: MakeupParty
    total: float
    subtotal: float
    tax_value: float
    tax_percent: float
    surcharge_value: float
    surcharge_percent: float
    observations: str
    payment_instructions: str
    RGPD: str
    type: str
    template: str
    concepts: List[dict]


@dataclass(frozen=True)
class CreateInvoiceResult:
    """Result of POST /invoice/store."""

    success: bool
    invoice_id: str
    chain_index: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> CreateInvoiceResult:
        """Build from a decoded JSON body.

        Raises:
            UnexpectedResponseError: If the body is not a JSON object.
        """
        if not isinstance(data, dict):
            raise UnexpectedResponseError("Invoice response is not a JSON object")
        chain_index = data.get("chainIndex")
        return cls(
            success=bool(data.get("success", False)),
            invoice_id=str(data.get("invoiceId") or ""),
            chain_index=chain_index if isinstance(chain_index, int) else None,
            raw=data,
        )
