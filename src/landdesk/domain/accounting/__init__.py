"""landdesk Domain Accounting -- profit and loss and client collection reports."""

from landdesk.domain.accounting.service import client_summary, profit_and_loss

__all__ = ["client_summary", "profit_and_loss"]
