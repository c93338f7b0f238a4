"""Plan and price models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field

from .base import OrbModel


class Item(OrbModel):
    id: str
    name: str


class Price(OrbModel):
    """A price attached to a plan or subscription.

    Only the fields common to every price model are typed; the
    model-specific configuration is kept as raw JSON.
    """

    model_config = ConfigDict(protected_namespaces=())

    id: str
    name: str
    model_type: str
    price_type: str | None = None
    cadence: str | None = None
    currency: str | None = None
    external_price_id: str | None = None
    fixed_price_quantity: Decimal | None = None
    item: Item | None = None
    unit_config: dict[str, Any] | None = None
    tiered_config: dict[str, Any] | None = None
    matrix_config: dict[str, Any] | None = None


class Plan(OrbModel):
    id: str
    external_id: str | None = Field(default=None, alias="external_plan_id")
    name: str
    description: str | None = None
    status: str | None = None
    currency: str | None = None
    default_invoice_memo: str | None = None
    net_terms: int | None = None
    prices: list[Price] = Field(default_factory=list)
    created_at: datetime
