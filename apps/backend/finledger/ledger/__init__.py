"""Ledger & billing computation engine.

Pure read-side derivations over the transaction ledger: account balances,
credit card statements and budget spending. Storage is reached only through
the :class:`~finledger.ledger.store.LedgerStore` protocol.
"""

from .balance import BalanceEngine, compute_balance, signed_amount
from .billing import compute_due_date, compute_statement_period
from .budgets import BudgetEnrichmentEngine, budget_period
from .deadline import Deadline
from .statement import StatementBuilder, statement_total
from .store import LedgerStore, TransactionFilter
from .types import (
    AccountSnapshot,
    BudgetRecord,
    EnrichedBudget,
    LedgerEntry,
    StatementPeriod,
    StatementReport,
)

__all__ = [
    "AccountSnapshot",
    "BalanceEngine",
    "BudgetEnrichmentEngine",
    "BudgetRecord",
    "Deadline",
    "EnrichedBudget",
    "LedgerEntry",
    "LedgerStore",
    "StatementBuilder",
    "StatementPeriod",
    "StatementReport",
    "TransactionFilter",
    "budget_period",
    "compute_balance",
    "compute_due_date",
    "compute_statement_period",
    "signed_amount",
    "statement_total",
]
