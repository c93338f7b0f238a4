"""Orb API client.

Architecture:
    ``OrbClient`` wires one ``HTTPClient``, one ``RESTTransport`` and one
    ``RetryEngine`` into a ``RestRunner``, then exposes each resource
    operation as a thin method pairing an endpoint spec with its adapter.
    Single-resource operations are coroutines; list operations return a
    lazy ``CursorPaginator`` and send nothing until iterated.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Any

from .core.config import ClientConfig, ListParams
from .core.enums import IngestionMode, SubscriptionStatus
from .endpoints import alerts, customers, events, invoices, plans, subscriptions
from .models import (
    Alert,
    AmendEventRequest,
    AmendEventResponse,
    CancelSubscriptionRequest,
    CreateCustomerRequest,
    CreateSubscriptionAlertRequest,
    CreateSubscriptionRequest,
    Customer,
    CustomerId,
    Event,
    EventSearchRequest,
    IngestEvent,
    IngestEventsResponse,
    Invoice,
    InvoiceStatusFilter,
    Plan,
    PriceIntervalsRequest,
    SchedulePlanChangeRequest,
    Subscription,
    SubscriptionCosts,
    SubscriptionCostsRequest,
    UpcomingInvoice,
    UpdateAlertRequest,
    UpdateCustomerRequest,
    UpdatePriceQuantityRequest,
    UpdateSubscriptionRequest,
)
from .runtime.pagination import CursorPaginator
from .runtime.rest import (
    HTTPClient,
    PageAdapter,
    ResponseAdapter,
    RestEndpointSpec,
    RestRunner,
    RESTTransport,
)
from .runtime.retry import RetryEngine, Sleep


class OrbClient:
    """Async client for the Orb billing API.

    Example:
        >>> async with OrbClient(ClientConfig(api_key="...")) as orb:
        ...     customer = await orb.get_customer("cus_123")
        ...     async for invoice in orb.list_invoices(customer=CustomerId.orb(customer.id)):
        ...         print(invoice.invoice_number, invoice.amount_due)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http: HTTPClient | None = None,
        rng: random.Random | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: Client configuration
            http: HTTP client to send requests through (one is created if omitted)
            rng: Jitter source for retry backoff
            sleep: Awaitable sleep used between retries
        """
        self.config = config
        self._transport = RESTTransport(config, http)
        self._retry = RetryEngine(config.retry, rng=rng, sleep=sleep)
        self._runner = RestRunner(
            self._transport, self._retry, max_pages=config.max_pages_per_listing
        )

    async def _run(
        self, spec: RestEndpointSpec, adapter: ResponseAdapter, params: dict[str, Any]
    ) -> Any:
        return await self._runner.run(spec=spec, adapter=adapter, params=params)

    def _paginate(
        self,
        spec: RestEndpointSpec,
        adapter: PageAdapter[Any],
        params: dict[str, Any],
        list_params: ListParams | None,
    ) -> CursorPaginator[Any]:
        return self._runner.paginate(
            spec=spec, adapter=adapter, params=params, list_params=list_params
        )

    # --- Customers ---

    def list_customers(self, params: ListParams | None = None) -> CursorPaginator[Customer]:
        return self._paginate(customers.LIST, customers.PAGE_ADAPTER, {}, params)

    async def get_customer(self, id: str) -> Customer:
        return await self._run(customers.GET, customers.ADAPTER, {"id": id})

    async def get_customer_by_external_id(self, external_id: str) -> Customer:
        return await self._run(
            customers.GET_BY_EXTERNAL_ID, customers.ADAPTER, {"external_id": external_id}
        )

    async def create_customer(
        self, request: CreateCustomerRequest, *, idempotency_key: str | None = None
    ) -> Customer:
        """Create a customer.

        Without ``idempotency_key`` the request is only retried when the server
        cannot have processed it (rate limiting, connection refused).
        """
        params = {"request": request, "idempotency_key": idempotency_key}
        return await self._run(customers.CREATE, customers.ADAPTER, params)

    async def update_customer(self, id: str, request: UpdateCustomerRequest) -> Customer:
        return await self._run(customers.UPDATE, customers.ADAPTER, {"id": id, "request": request})

    async def delete_customer(self, id: str) -> None:
        await self._run(customers.DELETE, customers.DELETE_ADAPTER, {"id": id})

    # --- Plans ---

    def list_plans(self, params: ListParams | None = None) -> CursorPaginator[Plan]:
        return self._paginate(plans.LIST, plans.PAGE_ADAPTER, {}, params)

    async def get_plan(self, id: str) -> Plan:
        return await self._run(plans.GET, plans.ADAPTER, {"id": id})

    async def get_plan_by_external_id(self, external_id: str) -> Plan:
        return await self._run(
            plans.GET_BY_EXTERNAL_ID, plans.ADAPTER, {"external_id": external_id}
        )

    # --- Subscriptions ---

    def list_subscriptions(
        self,
        params: ListParams | None = None,
        *,
        customer: CustomerId | None = None,
        status: SubscriptionStatus | None = None,
    ) -> CursorPaginator[Subscription]:
        """List subscriptions, skipping those whose customer was deleted."""
        filters = {"customer": customer, "status": status}
        return self._paginate(subscriptions.LIST, subscriptions.PAGE_ADAPTER, filters, params)

    async def get_subscription(self, id: str) -> Subscription:
        return await self._run(subscriptions.GET, subscriptions.ADAPTER, {"id": id})

    async def create_subscription(
        self, request: CreateSubscriptionRequest, *, idempotency_key: str | None = None
    ) -> Subscription:
        params = {"request": request, "idempotency_key": idempotency_key}
        return await self._run(subscriptions.CREATE, subscriptions.ADAPTER, params)

    async def cancel_subscription(
        self, id: str, request: CancelSubscriptionRequest
    ) -> Subscription:
        return await self._run(
            subscriptions.CANCEL, subscriptions.ADAPTER, {"id": id, "request": request}
        )

    async def unschedule_cancellation(self, id: str) -> Subscription:
        return await self._run(
            subscriptions.UNSCHEDULE_CANCELLATION, subscriptions.ADAPTER, {"id": id}
        )

    async def update_subscription(
        self, id: str, request: UpdateSubscriptionRequest
    ) -> Subscription:
        return await self._run(
            subscriptions.UPDATE, subscriptions.ADAPTER, {"id": id, "request": request}
        )

    async def update_price_quantity(
        self, id: str, request: UpdatePriceQuantityRequest
    ) -> Subscription:
        params = {"id": id, "request": request}
        return await self._run(
            subscriptions.UPDATE_FIXED_FEE_QUANTITY, subscriptions.ADAPTER, params
        )

    async def schedule_plan_change(
        self, id: str, request: SchedulePlanChangeRequest
    ) -> Subscription:
        params = {"id": id, "request": request}
        return await self._run(subscriptions.SCHEDULE_PLAN_CHANGE, subscriptions.ADAPTER, params)

    async def price_intervals(
        self,
        id: str,
        request: PriceIntervalsRequest,
        *,
        idempotency_key: str | None = None,
    ) -> Subscription:
        """Add or edit price and adjustment intervals on a subscription.

        Supplying ``idempotency_key`` makes the call retryable on server errors.
        """
        params = {"id": id, "request": request, "idempotency_key": idempotency_key}
        return await self._run(subscriptions.PRICE_INTERVALS, subscriptions.ADAPTER, params)

    async def fetch_subscription_costs(
        self, id: str, request: SubscriptionCostsRequest | None = None
    ) -> SubscriptionCosts:
        params = {"id": id, "request": request or SubscriptionCostsRequest()}
        return await self._run(subscriptions.COSTS, subscriptions.COSTS_ADAPTER, params)

    # --- Invoices ---

    def list_invoices(
        self,
        params: ListParams | None = None,
        *,
        customer: CustomerId | None = None,
        subscription_id: str | None = None,
        status_filter: InvoiceStatusFilter | None = None,
    ) -> CursorPaginator[Invoice]:
        """List invoices.

        Args:
            params: Page size
            customer: Restrict to one customer
            subscription_id: Restrict to one subscription
            status_filter: Statuses to include; issued, paid and synced by default
        """
        filters = {
            "customer": customer,
            "subscription_id": subscription_id,
            "status_filter": status_filter,
        }
        return self._paginate(invoices.LIST, invoices.PAGE_ADAPTER, filters, params)

    async def get_invoice(self, id: str) -> Invoice:
        return await self._run(invoices.GET, invoices.ADAPTER, {"id": id})

    async def void_invoice(self, id: str) -> Invoice:
        return await self._run(invoices.VOID, invoices.ADAPTER, {"id": id})

    async def fetch_upcoming_invoice(self, subscription_id: str) -> UpcomingInvoice:
        return await self._run(
            invoices.UPCOMING, invoices.UPCOMING_ADAPTER, {"subscription_id": subscription_id}
        )

    # --- Events ---

    def search_events(
        self, request: EventSearchRequest, params: ListParams | None = None
    ) -> CursorPaginator[Event]:
        return self._paginate(events.SEARCH, events.PAGE_ADAPTER, {"request": request}, params)

    async def ingest_events(
        self,
        mode: IngestionMode,
        events_to_ingest: Iterable[IngestEvent],
        *,
        backfill_id: str | None = None,
    ) -> IngestEventsResponse:
        """Ingest a batch of usage events.

        In ``IngestionMode.DEBUG`` the response lists which idempotency keys
        were ingested and which were duplicates.
        """
        batch = list(events_to_ingest)
        if not batch:
            raise ValueError("ingest_events requires at least one event")
        params = {"mode": IngestionMode(mode), "events": batch, "backfill_id": backfill_id}
        return await self._run(events.INGEST, events.INGEST_ADAPTER, params)

    async def amend_event(self, id: str, request: AmendEventRequest) -> AmendEventResponse:
        return await self._run(events.AMEND, events.AMEND_ADAPTER, {"id": id, "request": request})

    # --- Alerts ---

    def list_alerts(
        self, params: ListParams | None = None, *, subscription_id: str | None = None
    ) -> CursorPaginator[Alert]:
        filters = {"subscription_id": subscription_id}
        return self._paginate(alerts.LIST, alerts.PAGE_ADAPTER, filters, params)

    async def get_alert(self, id: str) -> Alert:
        return await self._run(alerts.GET, alerts.ADAPTER, {"id": id})

    async def create_subscription_alert(
        self, subscription_id: str, request: CreateSubscriptionAlertRequest
    ) -> Alert:
        params = {"subscription_id": subscription_id, "request": request}
        return await self._run(alerts.CREATE_FOR_SUBSCRIPTION, alerts.ADAPTER, params)

    async def enable_alert(self, id: str) -> Alert:
        return await self._run(alerts.ENABLE, alerts.ADAPTER, {"id": id})

    async def disable_alert(self, id: str) -> Alert:
        return await self._run(alerts.DISABLE, alerts.ADAPTER, {"id": id})

    async def update_alert(self, id: str, request: UpdateAlertRequest) -> Alert:
        return await self._run(alerts.UPDATE, alerts.ADAPTER, {"id": id, "request": request})

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> OrbClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
