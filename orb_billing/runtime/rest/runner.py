"""REST request runner using endpoint specs and response adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from orb_billing.core.config import ListParams
from orb_billing.core.enums import HttpMethod
from orb_billing.core.request import RequestIntent
from orb_billing.runtime.pagination import DEFAULT_MAX_PAGES, CursorPaginator
from orb_billing.runtime.retry import RetryEngine

from .adapters import PageAdapter, ResponseAdapter
from .transport import RESTTransport

T = TypeVar("T")


@dataclass(frozen=True)
class RestEndpointSpec:
    """Declarative description of one endpoint.

    Builders receive the call's params dict. ``idempotent`` overrides the
    default derived from the method and the Idempotency-Key header.
    """

    id: str
    method: HttpMethod
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], Any] | None = None
    build_body: Callable[[dict[str, Any]], Any] | None = None
    build_headers: Callable[[dict[str, Any]], dict[str, str | None]] | None = None
    idempotent: bool | None = None

    def build_intent(self, params: dict[str, Any]) -> RequestIntent:
        return RequestIntent.build(
            self.method,
            self.build_path(params),
            query=self.build_query(params) if self.build_query else None,
            body=self.build_body(params) if self.build_body else None,
            headers=self.build_headers(params) if self.build_headers else None,
            idempotent=self.idempotent,
        )


class RestRunner:
    """Executes endpoint specs through the retry engine.

    Single-shot calls go through ``run``; listings go through ``paginate``,
    which returns a lazy ``CursorPaginator`` without issuing any request.
    """

    def __init__(
        self,
        transport: RESTTransport,
        retry: RetryEngine | None = None,
        *,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self._t = transport
        self._retry = retry or RetryEngine()
        self._max_pages = max_pages

    async def run(
        self, *, spec: RestEndpointSpec, adapter: ResponseAdapter, params: dict[str, Any]
    ) -> Any:
        intent = spec.build_intent(params)

        async def attempt() -> Any:
            body = await self._t.perform(intent)
            return adapter.parse(body)

        result = await self._retry.call(intent, attempt, operation=spec.id)
        return result.value

    def paginate(
        self,
        *,
        spec: RestEndpointSpec,
        adapter: PageAdapter[T],
        params: dict[str, Any],
        list_params: ListParams | None = None,
    ) -> CursorPaginator[T]:
        list_params = list_params or ListParams()
        intent = spec.build_intent(params).with_query("limit", list_params.page_size)
        return CursorPaginator(
            intent=intent,
            decoder=adapter,
            perform=self._t.perform,
            retry=self._retry,
            max_pages=self._max_pages,
        )
