"""landdesk Domain Cancellations -- cancelled-sale reconciliation."""

from landdesk.domain.cancellations.models import CancelledSale, RefundStatus

__all__ = ["CancelledSale", "RefundStatus"]
