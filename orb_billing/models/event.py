"""Billable event models: search, ingestion and amendment."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from .base import OrbModel, RequestModel


class Event(OrbModel):
    id: str
    customer_id: str | None = None
    external_customer_id: str | None = None
    event_name: str
    properties: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime


class EventSearchRequest(RequestModel):
    """Body of an event search.

    ``event_ids`` are the Orb-assigned ids or the ingestion idempotency keys of
    the events to return; the timeframe bounds are optional.
    """

    event_ids: list[str] = Field(min_length=1, max_length=500)
    timeframe_start: datetime | None = None
    timeframe_end: datetime | None = None

    @model_validator(mode="after")
    def _check_timeframe(self) -> EventSearchRequest:
        start, end = self.timeframe_start, self.timeframe_end
        if start is not None and end is not None and start > end:
            raise ValueError("timeframe_start must not be after timeframe_end")
        return self


class IngestEvent(RequestModel):
    """One usage event to ingest.

    ``idempotency_key`` deduplicates the event server-side, which is what
    makes resending an ingestion batch safe.
    """

    idempotency_key: str = Field(min_length=1)
    event_name: str = Field(min_length=1)
    timestamp: datetime
    properties: dict[str, Any] = Field(default_factory=dict)
    customer_id: str | None = None
    external_customer_id: str | None = None

    @model_validator(mode="after")
    def _check_customer(self) -> IngestEvent:
        if (self.customer_id is None) == (self.external_customer_id is None):
            raise ValueError("set exactly one of customer_id or external_customer_id")
        return self


class IngestDebug(OrbModel):
    duplicate: list[str] = Field(default_factory=list)
    ingested: list[str] = Field(default_factory=list)


class ValidationFailure(OrbModel):
    idempotency_key: str
    validation_errors: list[str] = Field(default_factory=list)


class IngestEventsResponse(OrbModel):
    """Result of an ingestion call; ``debug`` is only set in debug mode."""

    validation_failed: list[ValidationFailure] = Field(default_factory=list)
    debug: IngestDebug | None = None


class AmendEventRequest(RequestModel):
    event_name: str = Field(min_length=1)
    timestamp: datetime
    properties: dict[str, Any] = Field(default_factory=dict)
    customer_id: str | None = None
    external_customer_id: str | None = None

    @model_validator(mode="after")
    def _check_customer(self) -> AmendEventRequest:
        if (self.customer_id is None) == (self.external_customer_id is None):
            raise ValueError("set exactly one of customer_id or external_customer_id")
        return self


class AmendEventResponse(OrbModel):
    amended: str
