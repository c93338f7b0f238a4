"""Cursor pagination engine.

Architecture:
    - definitions.py: Page, PageDecoder protocol, PaginationStats
    - paginator.py: CursorPaginator, the lazy pull-based listing iterator
    - telemetry.py: Structured log events

Usage:
    Endpoint wrappers build a ``RequestIntent`` template and a decoder, then
    hand them to ``CursorPaginator`` together with the transport's
    ``perform`` capability and a ``RetryEngine``.
"""

from __future__ import annotations

from .definitions import Page, PageDecoder, PaginationStats
from .paginator import DEFAULT_MAX_PAGES, CursorPaginator

__all__ = [
    "DEFAULT_MAX_PAGES",
    "CursorPaginator",
    "Page",
    "PageDecoder",
    "PaginationStats",
]
