from .order import (
    create_order,
    get_order,
    get_order_for_update,
    list_orders,
)

from .ledger import (
    get_ledger,
    get_or_create_ledger,
    get_usage_event_for_order,
    list_usage_events_between,
    list_usage_events_since,
)

__all__ = [
    # Order functions
    "create_order",
    "get_order",
    "get_order_for_update",
    "list_orders",

    # Ledger functions
    "get_ledger",
    "get_or_create_ledger",
    "get_usage_event_for_order",
    "list_usage_events_between",
    "list_usage_events_since",
]
