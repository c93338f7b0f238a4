"""Subscription endpoint definitions and adapters.

Listings can contain subscriptions whose customer was deleted; the API
replaces such a customer with ``{"id": ..., "deleted": true}``. Those entries
are dropped from the page. The same shape with ``deleted: false`` is not
something the API documents, so it fails decoding instead of being guessed at.
"""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod
from orb_billing.core.exceptions import DecodeError
from orb_billing.core.request import IDEMPOTENCY_KEY_HEADER
from orb_billing.models import DeletedCustomer, Subscription, SubscriptionCosts
from orb_billing.runtime.rest import ModelAdapter, PageAdapter, RestEndpointSpec, path


def skip_deleted_customers(subscription: Subscription) -> Subscription | None:
    customer = subscription.customer
    if isinstance(customer, DeletedCustomer):
        if not customer.deleted:
            raise DecodeError(
                f"Subscription {subscription.id} has a customer placeholder with deleted=false"
            )
        return None
    return subscription


def build_list_query(params: dict[str, Any]) -> list[tuple[str, Any]]:
    query: list[tuple[str, Any]] = []
    customer = params.get("customer")
    if customer is not None:
        query.append(customer.query_pair())
    status = params.get("status")
    if status is not None:
        query.append(("status", status.value))
    return query


def _subscription_path(*suffix: str):
    def build(params: dict[str, Any]) -> str:
        return path("subscriptions", params["id"], *suffix)

    return build


def _request_body(params: dict[str, Any]) -> dict[str, Any]:
    return params["request"].to_body()


LIST = RestEndpointSpec(
    id="list_subscriptions",
    method=HttpMethod.GET,
    build_path=lambda params: "/subscriptions",
    build_query=build_list_query,
)

GET = RestEndpointSpec(
    id="get_subscription", method=HttpMethod.GET, build_path=_subscription_path()
)

CREATE = RestEndpointSpec(
    id="create_subscription",
    method=HttpMethod.POST,
    build_path=lambda params: "/subscriptions",
    build_body=_request_body,
    build_headers=lambda params: {IDEMPOTENCY_KEY_HEADER: params.get("idempotency_key")},
)

CANCEL = RestEndpointSpec(
    id="cancel_subscription",
    method=HttpMethod.POST,
    build_path=_subscription_path("cancel"),
    build_body=_request_body,
)

UNSCHEDULE_CANCELLATION = RestEndpointSpec(
    id="unschedule_cancellation",
    method=HttpMethod.POST,
    build_path=_subscription_path("unschedule_cancellation"),
)

UPDATE = RestEndpointSpec(
    id="update_subscription",
    method=HttpMethod.PUT,
    build_path=_subscription_path(),
    build_body=_request_body,
)

UPDATE_FIXED_FEE_QUANTITY = RestEndpointSpec(
    id="update_fixed_fee_quantity",
    method=HttpMethod.POST,
    build_path=_subscription_path("update_fixed_fee_quantity"),
    build_body=_request_body,
)

SCHEDULE_PLAN_CHANGE = RestEndpointSpec(
    id="schedule_plan_change",
    method=HttpMethod.POST,
    build_path=_subscription_path("schedule_plan_change"),
    build_body=_request_body,
)

PRICE_INTERVALS = RestEndpointSpec(
    id="price_intervals",
    method=HttpMethod.POST,
    build_path=_subscription_path("price_intervals"),
    build_body=_request_body,
    build_headers=lambda params: {IDEMPOTENCY_KEY_HEADER: params.get("idempotency_key")},
)

COSTS = RestEndpointSpec(
    id="fetch_subscription_costs",
    method=HttpMethod.GET,
    build_path=_subscription_path("costs"),
    build_query=lambda params: params["request"].query_pairs(),
)

ADAPTER = ModelAdapter(Subscription)
COSTS_ADAPTER = ModelAdapter(SubscriptionCosts)
PAGE_ADAPTER = PageAdapter(Subscription, item_filter=skip_deleted_customers)
