"""Pagination data structures.

This module defines the page shape produced by typed decoders and the
statistics a paginator keeps about the listing it drives.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One decoded page of a listing.

    Attributes:
        items: Items in server order
        next_cursor: Opaque token for the next page, or None at the end of the
            collection
    """

    items: Sequence[T]
    next_cursor: str | None = None

    @property
    def is_last(self) -> bool:
        return self.next_cursor is None


class PageDecoder(Protocol[T_co]):
    """Maps a raw page body to a ``Page``.

    Implementations raise ``DecodeError`` when the body does not match the
    expected shape.
    """

    def decode_page(self, body: bytes) -> Page[T_co]: ...


@dataclass
class PaginationStats:
    """Running counters for one listing operation.

    Attributes:
        pages_fetched: Pages successfully fetched and decoded
        items_yielded: Items handed to the consumer
        attempts_per_page: Attempts the retry engine needed, per page, in order
        total_wait: Cumulative backoff wait across all pages, in seconds
    """

    pages_fetched: int = 0
    items_yielded: int = 0
    attempts_per_page: list[int] = field(default_factory=list)
    total_wait: float = 0.0

    def record_page(self, attempts: int, wait: float) -> None:
        self.pages_fetched += 1
        self.attempts_per_page.append(attempts)
        self.total_wait += wait
