"""Read-side value objects shared by the engine and its store adapters.

Everything here is frozen: the engine only derives, it never mutates ledger
state. ``from_attributes`` lets a store build them straight from ORM rows.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..models import AccountType, TxnType


class LedgerModel(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class AccountSnapshot(LedgerModel):
    id: int
    user_id: int
    name: str
    type: AccountType
    initial_balance: Decimal = Decimal("0.00")
    credit_limit: Optional[Decimal] = None
    statement_closing_day: Optional[int] = None
    payment_due_day: Optional[int] = None

    @property
    def is_credit_card(self) -> bool:
        return self.type == AccountType.CREDIT_CARD


class LedgerEntry(LedgerModel):
    id: int
    user_id: int
    description: str
    amount: Decimal = Field(gt=0)
    date: dt.date
    type: TxnType
    account_id: int
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None
    account_name: Optional[str] = None
    category_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_transfer_destination(self) -> "LedgerEntry":
        if self.type == TxnType.TRANSFER:
            if self.destination_account_id is None:
                raise ValueError("transfer requires destination_account_id")
            if self.destination_account_id == self.account_id:
                raise ValueError("transfer destination must differ from its source")
        elif self.destination_account_id is not None:
            raise ValueError("only transfers carry a destination_account_id")
        return self


class BudgetRecord(LedgerModel):
    id: int
    user_id: int
    category_id: int
    amount: Decimal
    month: int = Field(ge=1, le=12)
    year: int
    category_name: Optional[str] = None


class StatementPeriod(LedgerModel):
    """Billing cycle bounds, both ends inclusive."""

    start: dt.date
    end: dt.date

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


class StatementReport(LedgerModel):
    account_id: int
    account_name: str
    total: Decimal
    due_date: dt.date
    period: StatementPeriod
    transactions: tuple[LedgerEntry, ...] = ()


class EnrichedBudget(LedgerModel):
    id: int
    user_id: int
    category_id: int
    category_name: Optional[str] = None
    month: int
    year: int
    amount: Decimal
    spent_amount: Decimal
    # False when the spent sum could not be read and zero was reported instead
    spent_available: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance(self) -> Decimal:
        return self.amount - self.spent_amount
