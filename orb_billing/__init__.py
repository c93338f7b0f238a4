"""Async client for the Orb subscription-billing API.

Every request runs through a retry engine with exponential backoff, and every
listing is a lazy cursor paginator with loop detection.
"""

from .client import OrbClient
from .core import (
    DEFAULT_BASE_URL,
    AlertType,
    ApiError,
    AttemptTimeoutError,
    BillingCycleAlignment,
    CancelOption,
    ChangeOption,
    ClientConfig,
    ClientError,
    DecodeError,
    IngestionMode,
    InvoiceStatus,
    ListParams,
    OrbError,
    ProtocolLoopError,
    RateLimitError,
    RetriesExhaustedError,
    RetryConfig,
    ServerError,
    SubscriptionStatus,
    TransportError,
)
from .models import CustomerId, InvoiceStatusFilter
from .runtime.pagination import CursorPaginator, Page
from .runtime.retry import RetryEngine, RetryResult, retrying_call

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BASE_URL",
    "AlertType",
    "ApiError",
    "AttemptTimeoutError",
    "BillingCycleAlignment",
    "CancelOption",
    "ChangeOption",
    "ClientConfig",
    "ClientError",
    "CursorPaginator",
    "CustomerId",
    "DecodeError",
    "IngestionMode",
    "InvoiceStatus",
    "InvoiceStatusFilter",
    "ListParams",
    "OrbClient",
    "OrbError",
    "Page",
    "ProtocolLoopError",
    "RateLimitError",
    "RetriesExhaustedError",
    "RetryConfig",
    "RetryEngine",
    "RetryResult",
    "ServerError",
    "SubscriptionStatus",
    "TransportError",
    "retrying_call",
]
