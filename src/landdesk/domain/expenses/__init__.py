"""landdesk Domain Expenses -- expense ledger and commission payouts."""

from landdesk.domain.expenses.models import Expense, ExpenseCategory

__all__ = ["Expense", "ExpenseCategory"]
