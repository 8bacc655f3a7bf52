from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..models import TxnType
from .types import AccountSnapshot, BudgetRecord, LedgerEntry


@dataclass(frozen=True)
class TransactionFilter:
    """Optional narrowing for :meth:`LedgerStore.fetch_transactions`.

    ``account_id`` matches rows where the account is the source *or* the
    destination. ``start``/``end`` are inclusive.
    """

    account_id: Optional[int] = None
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None
    type: Optional[TxnType] = None
    category_ids: tuple[int, ...] = field(default_factory=tuple)
    description: Optional[str] = None


class LedgerStore(Protocol):
    """The narrow read interface the engine needs from storage.

    Implementations raise ``NotFound`` for missing rows and ``UpstreamFailure``
    when the backing store cannot be read.
    """

    def fetch_account(self, account_id: int, user_id: int) -> AccountSnapshot: ...

    def list_accounts(self, user_id: int) -> Sequence[AccountSnapshot]: ...

    def fetch_transactions(self, user_id: int, filters: TransactionFilter) -> Sequence[LedgerEntry]: ...

    def sum_expenses(self, user_id: int, category_id: int, start: dt.date, end_exclusive: dt.date) -> Decimal: ...

    def fetch_budget(self, budget_id: int, user_id: int) -> BudgetRecord: ...

    def list_budgets(self, user_id: int, month: int, year: int) -> Sequence[BudgetRecord]: ...
