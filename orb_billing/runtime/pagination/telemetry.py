"""Structured logging for listing operations."""

from __future__ import annotations

import logging

from .definitions import PaginationStats

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    listing: str,
    page_index: int,
    items: int,
    attempts: int,
    has_more: bool,
) -> None:
    """Log one decoded page.

    Args:
        listing: Listing label (e.g. "/invoices")
        page_index: Zero-based page index within the listing
        items: Items on the page
        attempts: Attempts the retry engine needed for this page
        has_more: Whether the server returned a successor cursor
    """
    logger.debug(
        "page_fetched",
        extra={
            "listing": listing,
            "page_index": page_index,
            "items": items,
            "attempts": attempts,
            "has_more": has_more,
        },
    )


def log_listing_complete(*, listing: str, stats: PaginationStats) -> None:
    logger.info(
        "listing_complete",
        extra={
            "listing": listing,
            "pages_fetched": stats.pages_fetched,
            "items_yielded": stats.items_yielded,
            "total_attempts": sum(stats.attempts_per_page),
            "total_wait_s": stats.total_wait,
        },
    )


def log_listing_error(
    *,
    listing: str,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a listing that failed while fetching a page.

    Args:
        listing: Listing label
        page_index: Zero-based index of the page that failed
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "listing_error",
        extra={
            "listing": listing,
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_listing_closed_early(*, listing: str, stats: PaginationStats, buffered: int) -> None:
    logger.debug(
        "listing_closed_early",
        extra={
            "listing": listing,
            "pages_fetched": stats.pages_fetched,
            "items_yielded": stats.items_yielded,
            "items_discarded": buffered,
        },
    )
