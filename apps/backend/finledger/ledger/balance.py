"""Account balance as a pure function of the ledger.

No balance is ever stored: the current figure is the initial balance plus the
signed sum of every transaction that touches the account, recomputed on each
read. A transfer credits its destination and debits its source from the same
row, so moving money between two accounts never changes their combined total.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from ..models import TxnType
from .deadline import Deadline, check_deadline
from .store import LedgerStore, TransactionFilter
from .types import AccountSnapshot, LedgerEntry


def signed_amount(account_id: int, entry: LedgerEntry) -> Decimal:
    """Effect of ``entry`` on ``account_id``: positive in, negative out, zero if unrelated."""
    if entry.type == TxnType.TRANSFER and entry.destination_account_id == account_id:
        return entry.amount
    if entry.account_id != account_id:
        return Decimal("0")
    if entry.type == TxnType.INCOME:
        return entry.amount
    # expense, or the debit side of a transfer
    return -entry.amount


def compute_balance(account: AccountSnapshot, transactions: Iterable[LedgerEntry]) -> Decimal:
    balance = Decimal(account.initial_balance)
    for entry in transactions:
        balance += signed_amount(account.id, entry)
    return balance


class BalanceEngine:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    def balance_for(self, account: AccountSnapshot, *, deadline: Optional[Deadline] = None) -> Decimal:
        check_deadline(deadline, "fetch_transactions")
        rows = self.store.fetch_transactions(account.user_id, TransactionFilter(account_id=account.id))
        return compute_balance(account, rows)

    def current_balance(self, account_id: int, user_id: int, *, deadline: Optional[Deadline] = None) -> Decimal:
        check_deadline(deadline, "fetch_account")
        account = self.store.fetch_account(account_id, user_id)
        return self.balance_for(account, deadline=deadline)
