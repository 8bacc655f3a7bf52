from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from ..core.errors import InvalidAccountType, MissingBillingConfig
from ..models import TxnType
from .billing import compute_due_date, compute_statement_period
from .deadline import Deadline, check_deadline
from .store import LedgerStore, TransactionFilter
from .types import AccountSnapshot, LedgerEntry, StatementReport


logger = structlog.get_logger(__name__)


def statement_total(account_id: int, transactions: Iterable[LedgerEntry]) -> Decimal:
    """Sum of the card's own expenses.

    Payments (transfers in) and refunds (income) are listed on the statement
    but do not net against the total.
    """
    total = Decimal("0.00")
    for entry in transactions:
        if entry.type == TxnType.EXPENSE and entry.account_id == account_id:
            total += entry.amount
    return total


class StatementBuilder:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    def build(
        self,
        account: AccountSnapshot,
        year: int,
        month: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> StatementReport:
        if not account.is_credit_card:
            raise InvalidAccountType(
                f"statements are only available for credit card accounts (account {account.id} is {account.type.value})"
            )
        if account.statement_closing_day is None or account.payment_due_day is None:
            raise MissingBillingConfig(f"credit card account {account.id} has no closing day or payment due day")

        period = compute_statement_period(account.statement_closing_day, year, month)
        due_date = compute_due_date(account.payment_due_day, year, month)
        logger.debug(
            "statement_period_computed",
            account_id=account.id,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
            due_date=due_date.isoformat(),
        )

        check_deadline(deadline, "fetch_transactions")
        rows = tuple(
            self.store.fetch_transactions(
                account.user_id,
                TransactionFilter(account_id=account.id, start=period.start, end=period.end),
            )
        )
        return StatementReport(
            account_id=account.id,
            account_name=account.name,
            total=statement_total(account.id, rows),
            due_date=due_date,
            period=period,
            transactions=rows,
        )

    def build_for(
        self,
        account_id: int,
        user_id: int,
        year: int,
        month: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> StatementReport:
        check_deadline(deadline, "fetch_account")
        account = self.store.fetch_account(account_id, user_id)
        return self.build(account, year, month, deadline=deadline)
