"""Customer endpoint definitions and adapters."""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod
from orb_billing.core.request import IDEMPOTENCY_KEY_HEADER
from orb_billing.models import Customer
from orb_billing.runtime.rest import EmptyAdapter, ModelAdapter, PageAdapter, RestEndpointSpec, path


def _customer_path(params: dict[str, Any]) -> str:
    return path("customers", params["id"])


def _external_customer_path(params: dict[str, Any]) -> str:
    return path("customers", "external_customer_id", params["external_id"])


def _request_body(params: dict[str, Any]) -> dict[str, Any]:
    return params["request"].to_body()


def _idempotency_headers(params: dict[str, Any]) -> dict[str, str | None]:
    return {IDEMPOTENCY_KEY_HEADER: params.get("idempotency_key")}


LIST = RestEndpointSpec(
    id="list_customers",
    method=HttpMethod.GET,
    build_path=lambda params: "/customers",
)

GET = RestEndpointSpec(id="get_customer", method=HttpMethod.GET, build_path=_customer_path)

GET_BY_EXTERNAL_ID = RestEndpointSpec(
    id="get_customer_by_external_id",
    method=HttpMethod.GET,
    build_path=_external_customer_path,
)

CREATE = RestEndpointSpec(
    id="create_customer",
    method=HttpMethod.POST,
    build_path=lambda params: "/customers",
    build_body=_request_body,
    build_headers=_idempotency_headers,
)

UPDATE = RestEndpointSpec(
    id="update_customer",
    method=HttpMethod.PUT,
    build_path=_customer_path,
    build_body=_request_body,
)

DELETE = RestEndpointSpec(id="delete_customer", method=HttpMethod.DELETE, build_path=_customer_path)

ADAPTER = ModelAdapter(Customer)
PAGE_ADAPTER = PageAdapter(Customer)
DELETE_ADAPTER = EmptyAdapter()
