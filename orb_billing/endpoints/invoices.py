"""Invoice endpoint definitions and adapters."""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod
from orb_billing.models import Invoice, InvoiceStatusFilter, UpcomingInvoice
from orb_billing.runtime.rest import ModelAdapter, PageAdapter, RestEndpointSpec, path


def build_list_query(params: dict[str, Any]) -> list[tuple[str, Any]]:
    """Customer and subscription filters followed by one ``status[]`` per status."""
    query: list[tuple[str, Any]] = []
    customer = params.get("customer")
    if customer is not None:
        query.append(customer.query_pair())
    if params.get("subscription_id") is not None:
        query.append(("subscription_id", params["subscription_id"]))
    status_filter: InvoiceStatusFilter = params.get("status_filter") or InvoiceStatusFilter()
    query.extend(status_filter.query_pairs())
    return query


LIST = RestEndpointSpec(
    id="list_invoices",
    method=HttpMethod.GET,
    build_path=lambda params: "/invoices",
    build_query=build_list_query,
)

GET = RestEndpointSpec(
    id="get_invoice",
    method=HttpMethod.GET,
    build_path=lambda params: path("invoices", params["id"]),
)

VOID = RestEndpointSpec(
    id="void_invoice",
    method=HttpMethod.POST,
    build_path=lambda params: path("invoices", params["id"], "void"),
)

UPCOMING = RestEndpointSpec(
    id="fetch_upcoming_invoice",
    method=HttpMethod.GET,
    build_path=lambda params: "/invoices/upcoming",
    build_query=lambda params: {"subscription_id": params["subscription_id"]},
)

ADAPTER = ModelAdapter(Invoice)
PAGE_ADAPTER = PageAdapter(Invoice)
UPCOMING_ADAPTER = ModelAdapter(UpcomingInvoice)
