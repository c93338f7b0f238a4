"""Event search, ingestion and amendment endpoints.

Search is a read-only POST and ingestion is deduplicated by each event's
idempotency key, so both are marked idempotent and retried like GETs.
"""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod, IngestionMode
from orb_billing.models import AmendEventResponse, Event, IngestEventsResponse
from orb_billing.runtime.rest import ModelAdapter, PageAdapter, RestEndpointSpec, path


def build_ingest_query(params: dict[str, Any]) -> dict[str, Any]:
    mode: IngestionMode = params["mode"]
    return {
        "debug": mode is IngestionMode.DEBUG,
        "backfill_id": params.get("backfill_id"),
    }


def build_ingest_body(params: dict[str, Any]) -> dict[str, Any]:
    return {"events": [event.to_body() for event in params["events"]]}


SEARCH = RestEndpointSpec(
    id="search_events",
    method=HttpMethod.POST,
    build_path=lambda params: "/events/search",
    build_body=lambda params: params["request"].to_body(),
    idempotent=True,
)

INGEST = RestEndpointSpec(
    id="ingest_events",
    method=HttpMethod.POST,
    build_path=lambda params: "/ingest",
    build_query=build_ingest_query,
    build_body=build_ingest_body,
    idempotent=True,
)

AMEND = RestEndpointSpec(
    id="amend_event",
    method=HttpMethod.PUT,
    build_path=lambda params: path("events", params["id"]),
    build_body=lambda params: params["request"].to_body(),
)

PAGE_ADAPTER = PageAdapter(Event)
INGEST_ADAPTER = ModelAdapter(IngestEventsResponse)
AMEND_ADAPTER = ModelAdapter(AmendEventResponse)
