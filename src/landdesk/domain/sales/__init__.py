"""landdesk Domain Sales -- clients, payments and receipts."""

from landdesk.domain.sales.models import Client, ClientStatus, Payment

__all__ = ["Client", "ClientStatus", "Payment"]
