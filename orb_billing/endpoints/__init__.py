"""Endpoint definitions, one module per resource.

Each module declares ``RestEndpointSpec`` constants and the adapters that
decode their responses; ``OrbClient`` pairs them up.
"""

from . import alerts, customers, events, invoices, plans, subscriptions

__all__ = ["alerts", "customers", "events", "invoices", "plans", "subscriptions"]
