"""Customer models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from .base import OrbModel, RequestModel


class Address(OrbModel):
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Customer(OrbModel):
    """A billing customer."""

    id: str
    external_id: str | None = Field(default=None, alias="external_customer_id")
    name: str
    email: str
    timezone: str | None = None
    currency: str | None = None
    balance: Decimal = Decimal("0")
    payment_provider: str | None = None
    payment_provider_id: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime


class DeletedCustomer(OrbModel):
    """Placeholder the API returns in place of a customer that was deleted."""

    id: str
    deleted: bool


class CreateCustomerRequest(RequestModel):
    name: str
    email: str
    external_customer_id: str | None = None
    timezone: str | None = None
    currency: str | None = None
    payment_provider: str | None = None
    payment_provider_id: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    metadata: dict[str, str] | None = None


class UpdateCustomerRequest(RequestModel):
    name: str | None = None
    email: str | None = None
    payment_provider: str | None = None
    payment_provider_id: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    metadata: dict[str, str | None] | None = None
