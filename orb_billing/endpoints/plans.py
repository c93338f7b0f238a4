"""Plan endpoint definitions and adapters."""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod
from orb_billing.models import Plan
from orb_billing.runtime.rest import ModelAdapter, PageAdapter, RestEndpointSpec, path


def build_path(params: dict[str, Any]) -> str:
    if "external_id" in params:
        return path("plans", "external_plan_id", params["external_id"])
    return path("plans", params["id"])


LIST = RestEndpointSpec(id="list_plans", method=HttpMethod.GET, build_path=lambda params: "/plans")

GET = RestEndpointSpec(id="get_plan", method=HttpMethod.GET, build_path=build_path)

GET_BY_EXTERNAL_ID = RestEndpointSpec(
    id="get_plan_by_external_id",
    method=HttpMethod.GET,
    build_path=build_path,
)

ADAPTER = ModelAdapter(Plan)
PAGE_ADAPTER = PageAdapter(Plan)
