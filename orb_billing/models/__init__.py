"""Pydantic models for Orb resources and request bodies."""

from .alert import Alert, AlertThreshold, CreateSubscriptionAlertRequest, UpdateAlertRequest
from .base import CustomerId, OrbModel, RequestModel
from .customer import (
    Address,
    CreateCustomerRequest,
    Customer,
    DeletedCustomer,
    UpdateCustomerRequest,
)
from .event import (
    AmendEventRequest,
    AmendEventResponse,
    Event,
    EventSearchRequest,
    IngestDebug,
    IngestEvent,
    IngestEventsResponse,
    ValidationFailure,
)
from .invoice import (
    DEFAULT_INVOICE_STATUSES,
    AutoCollection,
    Invoice,
    InvoiceCustomer,
    InvoiceLineItem,
    InvoiceStatusFilter,
    InvoiceSubscription,
    UpcomingInvoice,
)
from .plan import Item, Plan, Price
from .subscription import (
    AddAdjustmentInterval,
    AddPriceInterval,
    CancelSubscriptionRequest,
    CreateSubscriptionRequest,
    EditAdjustmentInterval,
    EditPriceInterval,
    FixedFeeQuantityTransition,
    NewMaximumAdjustment,
    PerPriceCosts,
    PriceInterval,
    PriceIntervalsRequest,
    QuantityOnlyPriceOverride,
    SchedulePlanChangeRequest,
    Subscription,
    SubscriptionCosts,
    SubscriptionCostsEntry,
    SubscriptionCostsRequest,
    SubscriptionFixedFee,
    UpdatePriceQuantityRequest,
    UpdateSubscriptionRequest,
)

__all__ = [
    "DEFAULT_INVOICE_STATUSES",
    "AddAdjustmentInterval",
    "AddPriceInterval",
    "Address",
    "Alert",
    "AlertThreshold",
    "AmendEventRequest",
    "AmendEventResponse",
    "AutoCollection",
    "CancelSubscriptionRequest",
    "CreateCustomerRequest",
    "CreateSubscriptionAlertRequest",
    "CreateSubscriptionRequest",
    "Customer",
    "CustomerId",
    "DeletedCustomer",
    "EditAdjustmentInterval",
    "EditPriceInterval",
    "Event",
    "EventSearchRequest",
    "FixedFeeQuantityTransition",
    "IngestDebug",
    "IngestEvent",
    "IngestEventsResponse",
    "Invoice",
    "InvoiceCustomer",
    "InvoiceLineItem",
    "InvoiceStatusFilter",
    "InvoiceSubscription",
    "Item",
    "NewMaximumAdjustment",
    "OrbModel",
    "PerPriceCosts",
    "Plan",
    "Price",
    "PriceInterval",
    "PriceIntervalsRequest",
    "QuantityOnlyPriceOverride",
    "RequestModel",
    "SchedulePlanChangeRequest",
    "Subscription",
    "SubscriptionCosts",
    "SubscriptionCostsEntry",
    "SubscriptionCostsRequest",
    "SubscriptionFixedFee",
    "UpcomingInvoice",
    "UpdateAlertRequest",
    "UpdateCustomerRequest",
    "UpdatePriceQuantityRequest",
    "UpdateSubscriptionRequest",
    "ValidationFailure",
]
