"""Shared model bases and identifier helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict


class OrbModel(BaseModel):
    """Immutable response model; unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class RequestModel(BaseModel):
    """Request body model."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        """JSON-ready body with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


@dataclass(frozen=True)
class CustomerId:
    """A customer identifier, either Orb-assigned or caller-assigned.

    Examples:
        >>> CustomerId.orb("cus_123").query_pair()
        ('customer_id', 'cus_123')
        >>> CustomerId.external("acme").query_pair()
        ('external_customer_id', 'acme')
    """

    value: str
    is_external: bool = False

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("customer identifier must be a non-empty string")

    @classmethod
    def orb(cls, value: str) -> CustomerId:
        return cls(value)

    @classmethod
    def external(cls, value: str) -> CustomerId:
        return cls(value, is_external=True)

    def query_pair(self) -> tuple[str, str]:
        name = "external_customer_id" if self.is_external else "customer_id"
        return name, self.value
