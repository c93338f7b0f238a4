"""Alert models."""

from __future__ import annotations

from orb_billing.core.enums import AlertType

from .base import OrbModel, RequestModel


class AlertThreshold(OrbModel):
    value: float


class Alert(OrbModel):
    id: str
    type: AlertType
    enabled: bool
    thresholds: list[AlertThreshold] | None = None
    currency: str | None = None


class CreateSubscriptionAlertRequest(RequestModel):
    type: AlertType
    thresholds: list[AlertThreshold] | None = None


class UpdateAlertRequest(RequestModel):
    thresholds: list[AlertThreshold]
