"""Subscription models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import Field, model_validator

from orb_billing.core.enums import (
    BillingCycleAlignment,
    CancelOption,
    ChangeOption,
    SubscriptionStatus,
)

from .base import OrbModel, RequestModel
from .customer import Customer, DeletedCustomer
from .plan import Plan, Price


class SubscriptionFixedFee(OrbModel):
    start_date: datetime
    end_date: datetime | None = None
    price_id: str
    quantity: Decimal


class PriceInterval(OrbModel):
    id: str
    start_date: datetime
    end_date: datetime | None = None
    price: Price
    billing_cycle_day: int | None = None
    fixed_fee_quantity_transitions: list[dict[str, Any]] | None = None


class Subscription(OrbModel):
    """A customer's subscription to a plan.

    ``customer`` is either a full ``Customer`` or, in listings, the deleted
    placeholder; listings drop entries for deleted customers.
    """

    id: str
    customer: Customer | DeletedCustomer
    plan: Plan
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime | None = None
    current_billing_period_start_date: datetime | None = None
    current_billing_period_end_date: datetime | None = None
    active_plan_phase_order: int | None = None
    fixed_fee_quantity_schedule: list[SubscriptionFixedFee] = Field(default_factory=list)
    net_terms: int
    auto_collection: bool | None = None
    default_invoice_memo: str | None = None
    invoicing_threshold: Decimal | None = None
    price_intervals: list[PriceInterval] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime


class CreateSubscriptionRequest(RequestModel):
    """Body for creating a subscription.

    Exactly one of ``customer_id`` / ``external_customer_id`` and one of
    ``plan_id`` / ``external_plan_id`` must be set.
    """

    customer_id: str | None = None
    external_customer_id: str | None = None
    plan_id: str | None = None
    external_plan_id: str | None = None
    start_date: datetime | None = None
    net_terms: int | None = None
    auto_collection: bool | None = None
    default_invoice_memo: str | None = None
    coupon_redemption_code: str | None = None
    external_marketplace: str | None = None
    external_marketplace_reporting_id: str | None = None
    metadata: dict[str, str] | None = None

    @model_validator(mode="after")
    def _check_ids(self) -> CreateSubscriptionRequest:
        if (self.customer_id is None) == (self.external_customer_id is None):
            raise ValueError("set exactly one of customer_id or external_customer_id")
        if (self.plan_id is None) == (self.external_plan_id is None):
            raise ValueError("set exactly one of plan_id or external_plan_id")
        if self.external_marketplace_reporting_id and not self.external_marketplace:
            raise ValueError("external_marketplace_reporting_id requires external_marketplace")
        return self


class CancelSubscriptionRequest(RequestModel):
    cancel_option: CancelOption
    cancellation_date: datetime | None = None

    @model_validator(mode="after")
    def _check_date(self) -> CancelSubscriptionRequest:
        requested = self.cancel_option is CancelOption.REQUESTED_DATE
        if requested != (self.cancellation_date is not None):
            raise ValueError(
                "cancellation_date is required exactly when cancel_option is requested_date"
            )
        return self


class UpdateSubscriptionRequest(RequestModel):
    auto_collection: bool | None = None
    default_invoice_memo: str | None = None
    invoicing_threshold: Decimal | None = None
    net_terms: int | None = None
    metadata: dict[str, str | None] | None = None


class UpdatePriceQuantityRequest(RequestModel):
    """Sets a new quantity on a fixed-fee price of the subscription."""

    price_id: str = Field(min_length=1)
    quantity: float = Field(ge=0)


class QuantityOnlyPriceOverride(RequestModel):
    id: str
    fixed_price_quantity: float


class SchedulePlanChangeRequest(RequestModel):
    """Body for moving a subscription to another plan.

    Exactly one of ``plan_id`` / ``external_plan_id`` must be set, and
    ``change_date`` is given exactly when ``change_option`` is requested_date.
    """

    plan_id: str | None = None
    external_plan_id: str | None = None
    change_option: ChangeOption = ChangeOption.IMMEDIATE
    change_date: datetime | None = None
    price_overrides: list[QuantityOnlyPriceOverride] | None = None
    coupon_redemption_code: str | None = None
    invoicing_threshold: Decimal | None = None
    billing_cycle_alignment: BillingCycleAlignment | None = None

    @model_validator(mode="after")
    def _check_plan_change(self) -> SchedulePlanChangeRequest:
        if (self.plan_id is None) == (self.external_plan_id is None):
            raise ValueError("set exactly one of plan_id or external_plan_id")
        requested = self.change_option is ChangeOption.REQUESTED_DATE
        if requested != (self.change_date is not None):
            raise ValueError("change_date is required exactly when change_option is requested_date")
        return self


class FixedFeeQuantityTransition(RequestModel):
    quantity: float = Field(ge=0)
    effective_date: date


class AddPriceInterval(RequestModel):
    start_date: datetime
    end_date: datetime | None = None
    price_id: str | None = None
    external_price_id: str | None = None
    fixed_fee_quantity_transitions: list[FixedFeeQuantityTransition] | None = None

    @model_validator(mode="after")
    def _check_price(self) -> AddPriceInterval:
        if (self.price_id is None) == (self.external_price_id is None):
            raise ValueError("set exactly one of price_id or external_price_id")
        return self


class EditPriceInterval(RequestModel):
    price_interval_id: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    fixed_fee_quantity_transitions: list[FixedFeeQuantityTransition] | None = None


class NewMaximumAdjustment(RequestModel):
    adjustment_type: Literal["maximum"] = "maximum"
    maximum_amount: Decimal
    applies_to_price_ids: list[str] | None = None
    applies_to_all: bool | None = None
    price_type: Literal["usage"] | None = None
    currency: str | None = None


class AddAdjustmentInterval(RequestModel):
    start_date: datetime
    end_date: datetime | None = None
    adjustment: NewMaximumAdjustment


class EditAdjustmentInterval(RequestModel):
    adjustment_interval_id: str
    end_date: datetime | None = None


class PriceIntervalsRequest(RequestModel):
    """Adds and edits price and adjustment intervals on a subscription.

    Replaying this request without an idempotency key may add the same
    interval twice; pass one to the client method to make it retryable.
    """

    add: list[AddPriceInterval] = Field(default_factory=list)
    edit: list[EditPriceInterval] = Field(default_factory=list)
    add_adjustments: list[AddAdjustmentInterval] = Field(default_factory=list)
    edit_adjustments: list[EditAdjustmentInterval] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_not_empty(self) -> PriceIntervalsRequest:
        if not (self.add or self.edit or self.add_adjustments or self.edit_adjustments):
            raise ValueError("price intervals request changes nothing")
        return self


class SubscriptionCostsRequest(RequestModel):
    """Timeframe for a costs query; start is inclusive and end exclusive."""

    timeframe_start: datetime | None = None
    timeframe_end: datetime | None = None

    @model_validator(mode="after")
    def _check_timeframe(self) -> SubscriptionCostsRequest:
        start, end = self.timeframe_start, self.timeframe_end
        if start is not None and end is not None and start >= end:
            raise ValueError("timeframe_start must be before timeframe_end")
        return self

    def query_pairs(self) -> list[tuple[str, str]]:
        return list(self.to_body().items())


class PerPriceCosts(OrbModel):
    price: Price
    subtotal: Decimal
    total: Decimal


class SubscriptionCostsEntry(OrbModel):
    timeframe_start: datetime
    timeframe_end: datetime
    subtotal: Decimal
    total: Decimal
    per_price_costs: list[PerPriceCosts] = Field(default_factory=list)


class SubscriptionCosts(OrbModel):
    data: list[SubscriptionCostsEntry]
