"""Invoice models and the invoice status filter."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from orb_billing.core.enums import InvoiceStatus

from .base import OrbModel

DEFAULT_INVOICE_STATUSES: tuple[InvoiceStatus, ...] = (
    InvoiceStatus.ISSUED,
    InvoiceStatus.PAID,
    InvoiceStatus.SYNCED,
)


class InvoiceCustomer(OrbModel):
    id: str
    external_id: str | None = Field(default=None, alias="external_customer_id")


class InvoiceSubscription(OrbModel):
    id: str


class AutoCollection(OrbModel):
    next_attempt_at: datetime | None = None
    previously_attempted_at: datetime | None = None
    enabled: bool | None = None
    num_attempts: int | None = None


class InvoiceLineItem(OrbModel):
    name: str
    amount: Decimal
    subtotal: Decimal
    adjusted_subtotal: Decimal | None = None
    partially_invoiced_amount: Decimal | None = None
    quantity: Decimal | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class _InvoiceFields(OrbModel):
    id: str
    customer: InvoiceCustomer
    subscription: InvoiceSubscription | None = None
    invoice_number: str
    invoice_pdf: str | None = None
    hosted_invoice_url: str | None = None
    currency: str
    total: Decimal
    amount_due: Decimal
    status: InvoiceStatus
    created_at: datetime
    issued_at: datetime | None = None
    payment_failed_at: datetime | None = None
    auto_collection: AutoCollection = Field(default_factory=AutoCollection)
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)


class Invoice(_InvoiceFields):
    """An issued or draft invoice."""

    invoice_date: datetime


class UpcomingInvoice(_InvoiceFields):
    """Preview of the next invoice for a subscription.

    Not yet dated, so it has a ``target_date`` instead of ``invoice_date``.
    """

    target_date: datetime | None = None


@dataclass(frozen=True)
class InvoiceStatusFilter:
    """Statuses an invoice listing is restricted to.

    Sent as one ``status[]`` query parameter per status, in declaration order
    of ``InvoiceStatus``. The default matches issued, paid and synced invoices.
    """

    statuses: frozenset[InvoiceStatus] = frozenset(DEFAULT_INVOICE_STATUSES)

    def __post_init__(self) -> None:
        if InvoiceStatus.OTHER in self.statuses:
            raise ValueError("InvoiceStatus.OTHER cannot be used as a filter")

    @classmethod
    def of(cls, statuses: Iterable[InvoiceStatus | str]) -> InvoiceStatusFilter:
        return cls(frozenset(InvoiceStatus(status) for status in statuses))

    def query_pairs(self) -> list[tuple[str, str]]:
        return [("status[]", status.value) for status in InvoiceStatus if status in self.statuses]
