"""
Services package

Request-scoped service classes wiring the ledger engine to its SQL store.
"""

from .account_service import AccountService
from .budget_service import BudgetService
from .sql_ledger_store import SqlLedgerStore

__all__ = [
    "AccountService",
    "BudgetService",
    "SqlLedgerStore",
]
