"""Cursor-driven lazy listing.

Architecture:
    ``CursorPaginator`` is a pull-based async iterator. Its whole state is a
    page buffer, the current cursor, the set of cursors already requested and
    a fetch-in-progress flag, all owned by the instance. Each pull either pops
    a buffered item or fetches the next page through the retry engine.

    The iterator is single-pass: once exhausted, failed or closed it only
    raises ``StopAsyncIteration``. Callers that need the data twice should
    collect it with ``to_list`` or start a new listing, since cursors are not
    guaranteed stable over time.

Design Decisions:
    - A page fetch happens only when the consumer pulls past the buffered items
    - Empty pages with a successor cursor do not end the listing
    - A successor cursor that was already requested raises ProtocolLoopError
      as soon as it is seen; that page's items are discarded
    - ``max_pages`` bounds the fetches of one listing as a circuit breaker
"""

from __future__ import annotations

from collections import deque
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Generic, NoReturn, TypeVar

from orb_billing.core.exceptions import OrbError, ProtocolLoopError
from orb_billing.core.request import RequestIntent
from orb_billing.runtime.retry import RetryEngine

from .definitions import Page, PageDecoder, PaginationStats
from .telemetry import (
    log_listing_closed_early,
    log_listing_complete,
    log_listing_error,
    log_page_fetched,
)

T = TypeVar("T")

Perform = Callable[[RequestIntent], Awaitable[bytes]]

DEFAULT_MAX_PAGES = 10_000


class CursorPaginator(Generic[T]):
    """Lazy, finite, forward-only sequence of items across pages.

    Example:
        >>> async with client.list_invoices() as invoices:
        ...     async for invoice in invoices:
        ...         print(invoice.id)
    """

    def __init__(
        self,
        *,
        intent: RequestIntent,
        decoder: PageDecoder[T],
        perform: Perform,
        retry: RetryEngine,
        max_pages: int = DEFAULT_MAX_PAGES,
        cursor_param: str = "cursor",
    ) -> None:
        """Initialize paginator.

        Args:
            intent: Request template; every field except the cursor is fixed
            decoder: Typed decoder turning a body into a Page
            perform: Executes one raw attempt and returns the 2xx body, raising
                classified errors otherwise
            retry: Retry engine protecting each page fetch
            max_pages: Maximum pages fetched by this listing
            cursor_param: Query parameter carrying the cursor
        """
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._intent = intent.with_query(cursor_param, None)
        self._decoder = decoder
        self._perform = perform
        self._retry = retry
        self._max_pages = max_pages
        self._cursor_param = cursor_param

        self._buffer: deque[T] = deque()
        self._cursor: str | None = None
        self._seen_cursors: set[str] = set()
        self._fetched_once = False
        self._fetching = False
        self._finished = False
        self.stats = PaginationStats()

    @property
    def listing(self) -> str:
        return self._intent.path

    @property
    def finished(self) -> bool:
        return self._finished

    def __aiter__(self) -> CursorPaginator[T]:
        return self

    async def __anext__(self) -> T:
        while True:
            if self._buffer:
                self.stats.items_yielded += 1
                return self._buffer.popleft()
            if self._finished:
                raise StopAsyncIteration
            if self._fetched_once and self._cursor is None:
                self._finished = True
                log_listing_complete(listing=self.listing, stats=self.stats)
                raise StopAsyncIteration
            await self._fetch_next_page()

    async def _fetch_next_page(self) -> None:
        if self._fetching:
            raise RuntimeError("CursorPaginator does not support concurrent iteration")
        if self.stats.pages_fetched >= self._max_pages:
            self._fail(
                ProtocolLoopError(
                    f"Listing {self.listing} exceeded {self._max_pages} pages",
                    cursor=self._cursor,
                    pages_fetched=self.stats.pages_fetched,
                )
            )

        intent = self._intent.with_query(self._cursor_param, self._cursor)
        self._fetching = True
        try:
            result = await self._retry.call(intent, lambda: self._attempt(intent))
        except OrbError as exc:
            self._fail(exc)
        finally:
            self._fetching = False

        page = result.value
        page_index = self.stats.pages_fetched
        self.stats.record_page(result.attempts, result.total_wait)
        log_page_fetched(
            listing=self.listing,
            page_index=page_index,
            items=len(page.items),
            attempts=result.attempts,
            has_more=page.next_cursor is not None,
        )

        if self._cursor is not None:
            self._seen_cursors.add(self._cursor)
        next_cursor = page.next_cursor
        if next_cursor is not None and next_cursor in self._seen_cursors:
            self._fail(
                ProtocolLoopError(
                    f"Listing {self.listing} returned cursor {next_cursor!r} twice",
                    cursor=next_cursor,
                    pages_fetched=self.stats.pages_fetched,
                )
            )

        self._fetched_once = True
        self._cursor = next_cursor
        self._buffer.extend(page.items)

    async def _attempt(self, intent: RequestIntent) -> Page[T]:
        body = await self._perform(intent)
        return self._decoder.decode_page(body)

    def _fail(self, error: OrbError) -> NoReturn:
        self._finished = True
        self._buffer.clear()
        log_listing_error(
            listing=self.listing,
            page_index=self.stats.pages_fetched,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        raise error

    async def aclose(self) -> None:
        """Stop the listing and drop buffered items. Safe to call repeatedly."""
        if self._finished:
            return
        self._finished = True
        log_listing_closed_early(listing=self.listing, stats=self.stats, buffered=len(self._buffer))
        self._buffer.clear()

    async def __aenter__(self) -> CursorPaginator[T]:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def to_list(self, limit: int | None = None) -> list[T]:
        """Consume the remaining items into a list.

        Args:
            limit: Stop after this many items and close the listing
        """
        out: list[T] = []
        if limit is not None and limit <= 0:
            await self.aclose()
            return out
        async for item in self:
            out.append(item)
            if limit is not None and len(out) >= limit:
                await self.aclose()
                break
        return out
