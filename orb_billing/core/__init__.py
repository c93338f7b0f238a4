"""Core components."""

from .config import DEFAULT_BASE_URL, MAX_PAGE_SIZE, ClientConfig, ListParams, RetryConfig
from .enums import (
    AlertType,
    BillingCycleAlignment,
    CancelOption,
    ChangeOption,
    HttpMethod,
    IngestionMode,
    InvoiceStatus,
    SubscriptionStatus,
)
from .exceptions import (
    ApiError,
    AttemptTimeoutError,
    ClientError,
    DecodeError,
    OrbError,
    ProtocolLoopError,
    RateLimitError,
    RetriesExhaustedError,
    ServerError,
    TransportError,
    error_from_response,
    parse_retry_after,
)
from .request import IDEMPOTENCY_KEY_HEADER, RequestIntent, normalize_query

__all__ = [
    "DEFAULT_BASE_URL",
    "MAX_PAGE_SIZE",
    "ClientConfig",
    "ListParams",
    "RetryConfig",
    "AlertType",
    "BillingCycleAlignment",
    "CancelOption",
    "ChangeOption",
    "HttpMethod",
    "IngestionMode",
    "InvoiceStatus",
    "SubscriptionStatus",
    "OrbError",
    "TransportError",
    "AttemptTimeoutError",
    "ApiError",
    "ServerError",
    "RateLimitError",
    "ClientError",
    "DecodeError",
    "ProtocolLoopError",
    "RetriesExhaustedError",
    "error_from_response",
    "parse_retry_after",
    "IDEMPOTENCY_KEY_HEADER",
    "RequestIntent",
    "normalize_query",
]
