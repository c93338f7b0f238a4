"""Alert endpoint definitions and adapters."""

from __future__ import annotations

from typing import Any

from orb_billing.core.enums import HttpMethod
from orb_billing.models import Alert
from orb_billing.runtime.rest import ModelAdapter, PageAdapter, RestEndpointSpec, path


def _alert_path(*suffix: str):
    def build(params: dict[str, Any]) -> str:
        return path("alerts", params["id"], *suffix)

    return build


LIST = RestEndpointSpec(
    id="list_alerts",
    method=HttpMethod.GET,
    build_path=lambda params: "/alerts",
    build_query=lambda params: {"subscription_id": params.get("subscription_id")},
)

GET = RestEndpointSpec(id="get_alert", method=HttpMethod.GET, build_path=_alert_path())

CREATE_FOR_SUBSCRIPTION = RestEndpointSpec(
    id="create_subscription_alert",
    method=HttpMethod.POST,
    build_path=lambda params: path("alerts", "subscription_id", params["subscription_id"]),
    build_body=lambda params: params["request"].to_body(),
)

ENABLE = RestEndpointSpec(
    id="enable_alert", method=HttpMethod.POST, build_path=_alert_path("enable")
)

DISABLE = RestEndpointSpec(
    id="disable_alert", method=HttpMethod.POST, build_path=_alert_path("disable")
)

UPDATE = RestEndpointSpec(
    id="update_alert",
    method=HttpMethod.PUT,
    build_path=_alert_path(),
    build_body=lambda params: params["request"].to_body(),
)

ADAPTER = ModelAdapter(Alert)
PAGE_ADAPTER = PageAdapter(Alert)
