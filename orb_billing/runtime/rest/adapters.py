"""Typed response decoders.

Adapters turn raw 2xx bodies into pydantic models. Every decoding failure is
raised as ``DecodeError`` so the retry engine treats it as terminal.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from orb_billing.core.exceptions import DecodeError
from orb_billing.runtime.pagination import Page

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def load_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"Response is not valid JSON: {e}", body=body) from e


class ResponseAdapter:
    """Base adapter; returns the decoded JSON payload unchanged."""

    def parse(self, body: bytes) -> Any:
        return load_json(body)


class ModelAdapter(ResponseAdapter, Generic[M]):
    """Decodes a single JSON object into ``model``."""

    def __init__(self, model: type[M]) -> None:
        self.model = model

    def parse(self, body: bytes) -> M:
        payload = load_json(body)
        try:
            return self.model.model_validate(payload)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Response does not match {self.model.__name__}: {e}", body=body
            ) from e


class EmptyAdapter(ResponseAdapter):
    """For endpoints whose body carries nothing of interest."""

    def parse(self, body: bytes) -> None:
        return None


class PageAdapter(Generic[T]):
    """Decodes the list envelope into a ``Page``.

    Expected shape::

        {"data": [...], "pagination_metadata": {"has_more": true, "next_cursor": "..."}}

    The successor cursor is ``next_cursor`` when ``has_more`` is true.
    ``item_filter`` may map an item to None to drop it from the page.
    """

    def __init__(
        self,
        item_type: type[T],
        *,
        item_filter: Callable[[T], T | None] | None = None,
    ) -> None:
        self.item_type = item_type
        self._items = TypeAdapter(list[item_type])  # type: ignore[valid-type]
        self._item_filter = item_filter
        self._item_name = getattr(item_type, "__name__", repr(item_type))

    def decode_page(self, body: bytes) -> Page[T]:
        payload = load_json(body)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise DecodeError("List response is missing the 'data' array", body=body)

        try:
            items = self._items.validate_python(payload["data"])
        except PydanticValidationError as e:
            raise DecodeError(
                f"List items do not match {self._item_name}: {e}",
                body=body,
            ) from e

        if self._item_filter is not None:
            items = [kept for kept in map(self._item_filter, items) if kept is not None]

        meta = payload.get("pagination_metadata")
        if meta is None:
            meta = {}
        if not isinstance(meta, dict):
            raise DecodeError("'pagination_metadata' is not an object", body=body)
        has_more = meta.get("has_more", False)
        if not isinstance(has_more, bool):
            raise DecodeError("'has_more' is not a boolean", body=body)
        next_cursor = meta.get("next_cursor") if has_more else None
        if next_cursor is not None and not isinstance(next_cursor, str):
            raise DecodeError("'next_cursor' is not a string", body=body)
        return Page(items=items, next_cursor=next_cursor)
