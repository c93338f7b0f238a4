"""Core enumerations shared by requests and models.

String enums serialize directly into query strings and JSON bodies. Status
enums returned by the API accept unknown values, so a new server-side status
does not break decoding of an otherwise valid listing.
"""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @property
    def is_idempotent(self) -> bool:
        """Whether repeating the request is safe by HTTP semantics."""
        return self is not HttpMethod.POST


class _OpenEnum(str, Enum):
    """String enum that maps unknown values to ``OTHER``."""

    @classmethod
    def _missing_(cls, value: object) -> _OpenEnum | None:
        return cls.__members__.get("OTHER")


class SubscriptionStatus(_OpenEnum):
    ACTIVE = "active"
    ENDED = "ended"
    UPCOMING = "upcoming"
    OTHER = "other"


class InvoiceStatus(_OpenEnum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    VOID = "void"
    SYNCED = "synced"
    OTHER = "other"


class AlertType(_OpenEnum):
    COST_EXCEEDED = "cost_exceeded"
    USAGE_EXCEEDED = "usage_exceeded"
    CREDIT_BALANCE_DEPLETED = "credit_balance_depleted"
    CREDIT_BALANCE_DROPPED = "credit_balance_dropped"
    CREDIT_BALANCE_RECOVERED = "credit_balance_recovered"
    OTHER = "other"


class IngestionMode(str, Enum):
    """Event ingestion mode.

    ``DEBUG`` asks the server to report which events were ingested and which
    were rejected as duplicates.
    """

    PRODUCTION = "production"
    DEBUG = "debug"


class CancelOption(str, Enum):
    END_OF_SUBSCRIPTION_TERM = "end_of_subscription_term"
    IMMEDIATE = "immediate"
    REQUESTED_DATE = "requested_date"


class ChangeOption(str, Enum):
    """When a plan change takes effect."""

    REQUESTED_DATE = "requested_date"
    END_OF_SUBSCRIPTION_TERM = "end_of_subscription_term"
    IMMEDIATE = "immediate"


class BillingCycleAlignment(str, Enum):
    UNCHANGED = "unchanged"
    PLAN_CHANGE_DATE = "plan_change_date"
    START_OF_MONTH = "start_of_month"
