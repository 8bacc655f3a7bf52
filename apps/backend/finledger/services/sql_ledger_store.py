from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Callable, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from finledger import models
from finledger.core.errors import NotFound, UpstreamFailure
from finledger.ledger.store import TransactionFilter
from finledger.ledger.types import AccountSnapshot, BudgetRecord, LedgerEntry


T = TypeVar("T")


class SqlLedgerStore:
    """``LedgerStore`` backed by the SQLAlchemy session of the request.

    Every query is scoped by ``user_id``. Driver/ORM errors surface as
    ``UpstreamFailure`` with the original exception chained.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _read(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except SQLAlchemyError as exc:
            raise UpstreamFailure(f"{operation} failed: {exc.__class__.__name__}") from exc

    # ---- Accounts --------------------------------------------------------
    def fetch_account(self, account_id: int, user_id: int) -> AccountSnapshot:
        row = self._read(
            "fetch_account",
            lambda: self.db.query(models.Account)
            .filter(models.Account.id == account_id, models.Account.user_id == user_id)
            .first(),
        )
        if row is None:
            raise NotFound.for_entity("account", account_id)
        return AccountSnapshot.model_validate(row)

    def list_accounts(self, user_id: int) -> list[AccountSnapshot]:
        rows = self._read(
            "list_accounts",
            lambda: self.db.query(models.Account)
            .filter(models.Account.user_id == user_id)
            .order_by(models.Account.name)
            .all(),
        )
        return [AccountSnapshot.model_validate(r) for r in rows]

    # ---- Transactions ----------------------------------------------------
    def fetch_transactions(self, user_id: int, filters: TransactionFilter) -> list[LedgerEntry]:
        rows = self._read("fetch_transactions", lambda: self._transactions_query(user_id, filters).all())
        return [LedgerEntry.model_validate(r) for r in rows]

    def _transactions_query(self, user_id: int, filters: TransactionFilter):
        q = (
            self.db.query(models.Transaction)
            .options(selectinload(models.Transaction.account), selectinload(models.Transaction.category))
            .filter(models.Transaction.user_id == user_id)
        )
        if filters.account_id is not None:
            q = q.filter(
                or_(
                    models.Transaction.account_id == filters.account_id,
                    models.Transaction.destination_account_id == filters.account_id,
                )
            )
        if filters.start is not None:
            q = q.filter(models.Transaction.date >= filters.start)
        if filters.end is not None:
            q = q.filter(models.Transaction.date <= filters.end)
        if filters.type is not None:
            q = q.filter(models.Transaction.type == filters.type)
        if filters.category_ids:
            q = q.filter(models.Transaction.category_id.in_(filters.category_ids))
        if filters.description:
            q = q.filter(models.Transaction.description.ilike(f"%{filters.description}%"))
        return q.order_by(models.Transaction.date.desc(), models.Transaction.id.desc())

    def sum_expenses(self, user_id: int, category_id: int, start: dt.date, end_exclusive: dt.date) -> Decimal:
        total = self._read(
            "sum_expenses",
            lambda: self.db.query(func.coalesce(func.sum(models.Transaction.amount), 0))
            .filter(
                models.Transaction.user_id == user_id,
                models.Transaction.category_id == category_id,
                models.Transaction.type == models.TxnType.EXPENSE,
                models.Transaction.date >= start,
                models.Transaction.date < end_exclusive,
            )
            .scalar(),
        )
        if total is None:
            return Decimal("0.00")
        return total if isinstance(total, Decimal) else Decimal(str(total))

    # ---- Budgets ---------------------------------------------------------
    def fetch_budget(self, budget_id: int, user_id: int) -> BudgetRecord:
        row = self._read(
            "fetch_budget",
            lambda: self.db.query(models.Budget)
            .options(selectinload(models.Budget.category))
            .filter(models.Budget.id == budget_id, models.Budget.user_id == user_id)
            .first(),
        )
        if row is None:
            raise NotFound.for_entity("budget", budget_id)
        return BudgetRecord.model_validate(row)

    def list_budgets(self, user_id: int, month: int, year: int) -> list[BudgetRecord]:
        rows = self._read(
            "list_budgets",
            lambda: self.db.query(models.Budget)
            .join(models.Category, models.Budget.category_id == models.Category.id)
            .options(selectinload(models.Budget.category))
            .filter(
                models.Budget.user_id == user_id,
                models.Budget.month == month,
                models.Budget.year == year,
            )
            .order_by(models.Category.name)
            .all(),
        )
        return [BudgetRecord.model_validate(r) for r in rows]
