"""Immutable description of one logical API call.

A ``RequestIntent`` is built once per call site and never mutated. The
pagination engine derives per-page intents with ``with_query``, which returns
a new instance.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .enums import HttpMethod

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"

QueryValue = str | int | float | bool
QueryInput = Mapping[str, QueryValue | None] | Iterable[tuple[str, QueryValue | None]]


def _normalize_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_query(query: QueryInput | None) -> tuple[tuple[str, str], ...]:
    """Flatten query input into ordered (name, value) pairs.

    Pairs whose value is None are dropped. Repeated names are kept, which is
    how array parameters such as ``status[]`` are expressed.
    """
    if query is None:
        return ()
    items = query.items() if isinstance(query, Mapping) else query
    return tuple((name, _normalize_value(value)) for name, value in items if value is not None)


@dataclass(frozen=True)
class RequestIntent:
    """One logical API call.

    Attributes:
        method: HTTP method
        path: Path relative to the configured base URL, starting with "/"
        query: Ordered query pairs; names may repeat
        body: JSON-serializable body, or None
        headers: Extra request headers
        idempotent: Whether the call is safe to repeat. Derived from the method
            and the presence of an Idempotency-Key header when not given.
    """

    method: HttpMethod
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: Any = None
    headers: tuple[tuple[str, str], ...] = ()
    idempotent: bool | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            raise ValueError(f"path must start with '/': {self.path!r}")
        if self.idempotent is None:
            key_header = IDEMPOTENCY_KEY_HEADER.lower()
            has_key = any(name.lower() == key_header for name, _ in self.headers)
            object.__setattr__(self, "idempotent", self.method.is_idempotent or has_key)

    @classmethod
    def build(
        cls,
        method: HttpMethod | str,
        path: str,
        *,
        query: QueryInput | None = None,
        body: Any = None,
        headers: Mapping[str, str | None] | None = None,
        idempotency_key: str | None = None,
        idempotent: bool | None = None,
    ) -> RequestIntent:
        """Construct an intent from loose inputs."""
        header_pairs = [(k, v) for k, v in (headers or {}).items() if v is not None]
        if idempotency_key is not None:
            header_pairs.append((IDEMPOTENCY_KEY_HEADER, idempotency_key))
        return cls(
            method=HttpMethod(method),
            path=path,
            query=normalize_query(query),
            body=body,
            headers=tuple(header_pairs),
            idempotent=idempotent,
        )

    def with_query(self, name: str, value: QueryValue | None) -> RequestIntent:
        """Return a copy with ``name`` set to ``value``.

        Any existing pairs for ``name`` are removed first; a None value only
        removes them.
        """
        pairs = tuple((k, v) for k, v in self.query if k != name)
        if value is not None:
            pairs += ((name, _normalize_value(value)),)
        return replace(self, query=pairs)

    def query_value(self, name: str) -> str | None:
        for key, value in self.query:
            if key == name:
                return value
        return None
