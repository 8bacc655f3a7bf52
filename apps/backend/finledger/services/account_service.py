from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog

from finledger.core.errors import DeadlineExceeded
from finledger.ledger import BalanceEngine, Deadline, LedgerStore, StatementBuilder
from finledger.ledger.deadline import check_deadline
from finledger.ledger.types import AccountSnapshot, StatementReport


logger = structlog.get_logger(__name__)


class AccountService:
    """Accounts enriched with their derived balance, plus credit card statements."""

    def __init__(self, store: LedgerStore) -> None:
        self.store = store
        self.balances = BalanceEngine(store)
        self.statements = StatementBuilder(store)

    def get_account(
        self,
        account_id: int,
        user_id: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> tuple[AccountSnapshot, Decimal]:
        check_deadline(deadline, "fetch_account")
        account = self.store.fetch_account(account_id, user_id)
        try:
            balance = self.balances.balance_for(account, deadline=deadline)
        except Exception as exc:
            logger.error("account_balance_failed", account_id=account_id, user_id=user_id, error=str(exc))
            raise
        return account, balance

    def list_accounts(
        self,
        user_id: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> list[tuple[AccountSnapshot, Decimal]]:
        check_deadline(deadline, "list_accounts")
        rows: list[tuple[AccountSnapshot, Decimal]] = []
        for account in self.store.list_accounts(user_id):
            try:
                balance = self.balances.balance_for(account, deadline=deadline)
            except DeadlineExceeded:
                raise
            except Exception as exc:
                logger.warning("account_balance_degraded", account_id=account.id, user_id=user_id, error=str(exc))
                balance = Decimal("0.00")
            rows.append((account, balance))
        return rows

    def get_statement(
        self,
        account_id: int,
        user_id: int,
        year: int,
        month: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> StatementReport:
        return self.statements.build_for(account_id, user_id, year, month, deadline=deadline)
