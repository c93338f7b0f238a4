"""Unit tests for OrbClient wired to a mocked HTTP layer."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from orb_billing import (
    ClientConfig,
    ClientError,
    CustomerId,
    IngestionMode,
    ListParams,
    OrbClient,
    ProtocolLoopError,
    RetryConfig,
    ServerError,
)
from orb_billing.models import (
    CancelSubscriptionRequest,
    CreateCustomerRequest,
    EditPriceInterval,
    EventSearchRequest,
    IngestEvent,
    PriceIntervalsRequest,
    SchedulePlanChangeRequest,
    UpdateAlertRequest,
    UpdatePriceQuantityRequest,
)
from orb_billing.runtime.rest import RawResponse

BASE = "https://api.example.com/v1"

CUSTOMER = {
    "id": "cus_1",
    "external_customer_id": "acme",
    "name": "Acme",
    "email": "billing@acme.test",
    "created_at": "2024-01-01T00:00:00+00:00",
}

INVOICE = {
    "id": "inv_1",
    "customer": {"id": "cus_1"},
    "invoice_number": "INV-1",
    "invoice_date": "2024-02-01T00:00:00+00:00",
    "currency": "USD",
    "total": "10.00",
    "amount_due": "10.00",
    "status": "paid",
    "created_at": "2024-02-01T00:00:00+00:00",
}

SUBSCRIPTION = {
    "id": "sub_1",
    "customer": CUSTOMER,
    "plan": {"id": "pln_1", "name": "Starter", "created_at": "2024-01-01T00:00:00+00:00"},
    "status": "active",
    "start_date": "2024-01-01T00:00:00+00:00",
    "net_terms": 30,
    "created_at": "2024-01-01T00:00:00+00:00",
}

ALERT = {"id": "al_1", "type": "cost_exceeded", "enabled": True, "thresholds": [{"value": 10}]}


def json_response(payload, status=200, headers=None):
    return RawResponse(status, headers or {}, json.dumps(payload).encode())


def listing(data, next_cursor=None):
    meta = {"has_more": next_cursor is not None, "next_cursor": next_cursor}
    return json_response({"data": data, "pagination_metadata": meta})


def make_client(*responses, sleeps, rng, max_attempts=3):
    http = MagicMock()
    http.send = AsyncMock(side_effect=list(responses))
    http.close = AsyncMock()
    config = ClientConfig(
        api_key="test-key",
        base_url=BASE,
        retry=RetryConfig(max_attempts=max_attempts, base_delay=0.1, max_delay=1.0),
    )
    return OrbClient(config, http=http, rng=rng, sleep=sleeps), http


def sent(http, index=-1):
    call = http.send.call_args_list[index]
    method, url = call.args
    body = call.kwargs["body"]
    return method, url, call.kwargs["headers"], json.loads(body) if body else None


class TestOrbClientSingleCalls:
    """Test non-listing operations."""

    @pytest.mark.asyncio
    async def test_get_customer(self, sleeps, rng):
        client, http = make_client(json_response(CUSTOMER), sleeps=sleeps, rng=rng)
        customer = await client.get_customer("cus_1")

        assert customer.id == "cus_1"
        method, url, headers, _ = sent(http)
        assert (method, url) == ("GET", f"{BASE}/customers/cus_1")
        assert headers["Authorization"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_get_customer_retries_server_errors(self, sleeps, rng):
        client, http = make_client(
            RawResponse(503, {}, b"unavailable"), json_response(CUSTOMER), sleeps=sleeps, rng=rng
        )
        customer = await client.get_customer_by_external_id("acme")
        assert customer.external_id == "acme"
        assert http.send.await_count == 2
        assert len(sleeps.calls) == 1
        assert sent(http)[1] == f"{BASE}/customers/external_customer_id/acme"

    @pytest.mark.asyncio
    async def test_create_customer_without_key_not_retried_on_500(self, sleeps, rng):
        client, http = make_client(RawResponse(500, {}, b""), sleeps=sleeps, rng=rng)
        with pytest.raises(ServerError) as excinfo:
            await client.create_customer(CreateCustomerRequest(name="Acme", email="a@acme.test"))
        assert excinfo.value.attempts == 1
        assert http.send.await_count == 1

    @pytest.mark.asyncio
    async def test_create_customer_with_key_retried(self, sleeps, rng):
        client, http = make_client(
            RawResponse(500, {}, b""), json_response(CUSTOMER), sleeps=sleeps, rng=rng
        )
        await client.create_customer(
            CreateCustomerRequest(name="Acme", email="a@acme.test"), idempotency_key="create-acme"
        )
        assert http.send.await_count == 2
        _, _, headers, body = sent(http)
        assert headers["Idempotency-Key"] == "create-acme"
        assert body == {"name": "Acme", "email": "a@acme.test"}

    @pytest.mark.asyncio
    async def test_rate_limit_hint_respected(self, sleeps, rng):
        client, _ = make_client(
            RawResponse(429, {"Retry-After": "0.5"}, b""), json_response(CUSTOMER), sleeps=sleeps, rng=rng
        )
        await client.get_customer("cus_1")
        assert sleeps.calls == [0.5]

    @pytest.mark.asyncio
    async def test_client_error_surfaces(self, sleeps, rng):
        error_body = {"title": "Not found", "detail": "No customer cus_x", "type": "not_found"}
        client, http = make_client(json_response(error_body, status=404), sleeps=sleeps, rng=rng)
        with pytest.raises(ClientError) as excinfo:
            await client.get_customer("cus_x")
        assert excinfo.value.status_code == 404
        assert excinfo.value.detail == "No customer cus_x"
        assert excinfo.value.attempts == 1
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_delete_customer(self, sleeps, rng):
        client, http = make_client(RawResponse(204), sleeps=sleeps, rng=rng)
        assert await client.delete_customer("cus_1") is None
        assert sent(http)[:2] == ("DELETE", f"{BASE}/customers/cus_1")

    @pytest.mark.asyncio
    async def test_cancel_subscription(self, sleeps, rng):
        subscription = {
            "id": "sub_1",
            "customer": CUSTOMER,
            "plan": {"id": "pln_1", "name": "Starter", "created_at": "2024-01-01T00:00:00+00:00"},
            "status": "active",
            "start_date": "2024-01-01T00:00:00+00:00",
            "end_date": "2024-06-01T00:00:00+00:00",
            "net_terms": 30,
            "created_at": "2024-01-01T00:00:00+00:00",
        }
        client, http = make_client(json_response(subscription), sleeps=sleeps, rng=rng)
        result = await client.cancel_subscription(
            "sub_1", CancelSubscriptionRequest(cancel_option="end_of_subscription_term")
        )
        assert result.end_date is not None
        method, url, _, body = sent(http)
        assert (method, url) == ("POST", f"{BASE}/subscriptions/sub_1/cancel")
        assert body == {"cancel_option": "end_of_subscription_term"}

    @pytest.mark.asyncio
    async def test_price_intervals_without_key_not_retried(self, sleeps, rng):
        client, http = make_client(RawResponse(502, {}, b""), sleeps=sleeps, rng=rng)
        request = PriceIntervalsRequest(edit=[EditPriceInterval(price_interval_id="pi_1")])
        with pytest.raises(ServerError):
            await client.price_intervals("sub_1", request)
        assert http.send.await_count == 1
        assert sleeps.calls == []

    @pytest.mark.asyncio
    async def test_price_intervals_with_key_retried(self, sleeps, rng):
        client, http = make_client(
            RawResponse(502, {}, b""), json_response(SUBSCRIPTION), sleeps=sleeps, rng=rng
        )
        request = PriceIntervalsRequest(edit=[EditPriceInterval(price_interval_id="pi_1")])
        result = await client.price_intervals("sub_1", request, idempotency_key="pi-sub_1")

        assert result.id == "sub_1"
        assert http.send.await_count == 2
        method, url, headers, body = sent(http)
        assert (method, url) == ("POST", f"{BASE}/subscriptions/sub_1/price_intervals")
        assert headers["Idempotency-Key"] == "pi-sub_1"
        assert body["edit"] == [{"price_interval_id": "pi_1"}]

    @pytest.mark.asyncio
    async def test_plan_and_quantity_changes(self, sleeps, rng):
        client, http = make_client(
            json_response(SUBSCRIPTION), json_response(SUBSCRIPTION), sleeps=sleeps, rng=rng
        )
        await client.update_price_quantity(
            "sub_1", UpdatePriceQuantityRequest(price_id="price_1", quantity=3)
        )
        assert sent(http)[1] == f"{BASE}/subscriptions/sub_1/update_fixed_fee_quantity"
        assert sent(http)[3] == {"price_id": "price_1", "quantity": 3.0}

        await client.schedule_plan_change("sub_1", SchedulePlanChangeRequest(plan_id="pln_2"))
        _, url, _, body = sent(http)
        assert url == f"{BASE}/subscriptions/sub_1/schedule_plan_change"
        assert body == {"plan_id": "pln_2", "change_option": "immediate"}

    @pytest.mark.asyncio
    async def test_fetch_subscription_costs(self, sleeps, rng):
        costs = {
            "data": [
                {
                    "timeframe_start": "2024-03-01T00:00:00+00:00",
                    "timeframe_end": "2024-04-01T00:00:00+00:00",
                    "subtotal": "5.00",
                    "total": "5.00",
                    "per_price_costs": [],
                }
            ]
        }
        client, http = make_client(
            RawResponse(500, {}, b""), json_response(costs), sleeps=sleeps, rng=rng
        )
        result = await client.fetch_subscription_costs("sub_1")

        assert [entry.total for entry in result.data] == [Decimal("5.00")]
        assert http.send.await_count == 2
        method, url, _, body = sent(http)
        assert (method, url) == ("GET", f"{BASE}/subscriptions/sub_1/costs")
        assert body is None

    @pytest.mark.asyncio
    async def test_fetch_upcoming_invoice(self, sleeps, rng):
        upcoming = {k: v for k, v in INVOICE.items() if k != "invoice_date"}
        upcoming["target_date"] = "2024-03-01T00:00:00+00:00"
        client, http = make_client(json_response(upcoming), sleeps=sleeps, rng=rng)
        invoice = await client.fetch_upcoming_invoice("sub_1")
        assert invoice.target_date is not None
        assert sent(http)[1] == f"{BASE}/invoices/upcoming?subscription_id=sub_1"

    @pytest.mark.asyncio
    async def test_ingest_events_debug(self, sleeps, rng):
        response = {"validation_failed": [], "debug": {"duplicate": [], "ingested": ["k1"]}}
        client, http = make_client(json_response(response), sleeps=sleeps, rng=rng)
        event = IngestEvent(
            idempotency_key="k1",
            event_name="api_call",
            timestamp=datetime(2024, 3, 1, tzinfo=UTC),
            external_customer_id="acme",
        )
        result = await client.ingest_events(IngestionMode.DEBUG, [event])

        assert result.debug.ingested == ["k1"]
        method, url, _, body = sent(http)
        assert (method, url) == ("POST", f"{BASE}/ingest?debug=true")
        assert body["events"][0]["event_name"] == "api_call"

    @pytest.mark.asyncio
    async def test_ingest_events_requires_events(self, sleeps, rng):
        client, http = make_client(sleeps=sleeps, rng=rng)
        with pytest.raises(ValueError):
            await client.ingest_events(IngestionMode.PRODUCTION, [])
        http.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_alert_actions(self, sleeps, rng):
        client, http = make_client(
            json_response(ALERT | {"enabled": False}), json_response(ALERT), json_response(ALERT),
            sleeps=sleeps, rng=rng,
        )
        assert (await client.disable_alert("al_1")).enabled is False
        assert (await client.enable_alert("al_1")).enabled is True
        await client.update_alert("al_1", UpdateAlertRequest(thresholds=[{"value": 20}]))

        assert [sent(http, i)[:2] for i in range(3)] == [
            ("POST", f"{BASE}/alerts/al_1/disable"),
            ("POST", f"{BASE}/alerts/al_1/enable"),
            ("PUT", f"{BASE}/alerts/al_1"),
        ]

    @pytest.mark.asyncio
    async def test_context_manager_closes_http(self, sleeps, rng):
        client, http = make_client(sleeps=sleeps, rng=rng)
        async with client:
            pass
        http.close.assert_awaited_once()


class TestOrbClientListings:
    """Test listing operations end to end."""

    @pytest.mark.asyncio
    async def test_list_invoices(self, sleeps, rng):
        client, http = make_client(
            listing([INVOICE], "c1"), listing([INVOICE | {"id": "inv_2"}]), sleeps=sleeps, rng=rng
        )
        paginator = client.list_invoices(
            ListParams(page_size=1), customer=CustomerId.external("acme")
        )
        http.send.assert_not_awaited()

        invoices = await paginator.to_list()
        assert [invoice.id for invoice in invoices] == ["inv_1", "inv_2"]
        first_url, second_url = sent(http, 0)[1], sent(http, 1)[1]
        assert first_url == (
            f"{BASE}/invoices?external_customer_id=acme"
            "&status%5B%5D=issued&status%5B%5D=paid&status%5B%5D=synced&limit=1"
        )
        assert second_url.endswith("&limit=1&cursor=c1")

    @pytest.mark.asyncio
    async def test_list_subscriptions_skips_deleted_customers(self, sleeps, rng):
        def subscription(sub_id, customer):
            return {
                "id": sub_id,
                "customer": customer,
                "plan": {"id": "pln_1", "name": "Starter", "created_at": "2024-01-01T00:00:00+00:00"},
                "status": "active",
                "start_date": "2024-01-01T00:00:00+00:00",
                "net_terms": 0,
                "created_at": "2024-01-01T00:00:00+00:00",
            }

        client, _ = make_client(
            listing([subscription("s1", {"id": "cus_0", "deleted": True}), subscription("s2", CUSTOMER)]),
            sleeps=sleeps,
            rng=rng,
        )
        subscriptions = await client.list_subscriptions().to_list()
        assert [s.id for s in subscriptions] == ["s2"]

    @pytest.mark.asyncio
    async def test_listing_page_ceiling_from_config(self, sleeps, rng):
        http = MagicMock()
        http.send = AsyncMock(side_effect=[listing([CUSTOMER], f"c{n}") for n in range(5)])
        config = ClientConfig(api_key="k", base_url=BASE, max_pages_per_listing=2)
        client = OrbClient(config, http=http, rng=rng, sleep=sleeps)

        with pytest.raises(ProtocolLoopError):
            await client.list_customers().to_list()
        assert http.send.await_count == 2

    @pytest.mark.asyncio
    async def test_search_events_is_paginated_post(self, sleeps, rng):
        event = {
            "id": "ev_1",
            "customer_id": "cus_1",
            "event_name": "api_call",
            "properties": {},
            "timestamp": "2024-03-01T00:00:00+00:00",
        }
        client, http = make_client(
            RawResponse(502, {}, b""), listing([event]), sleeps=sleeps, rng=rng
        )
        found = await client.search_events(EventSearchRequest(event_ids=["ev_1"])).to_list()

        assert [e.id for e in found] == ["ev_1"]
        method, url, _, body = sent(http)
        assert (method, url) == ("POST", f"{BASE}/events/search?limit=20")
        assert body == {"event_ids": ["ev_1"]}
        assert http.send.await_count == 2

    @pytest.mark.asyncio
    async def test_list_alerts_filter(self, sleeps, rng):
        client, http = make_client(listing([ALERT]), sleeps=sleeps, rng=rng)
        found = await client.list_alerts(subscription_id="sub_1").to_list()
        assert [a.id for a in found] == ["al_1"]
        assert sent(http)[1] == f"{BASE}/alerts?subscription_id=sub_1&limit=20"
