from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from .models import AccountType, TxnType


# ---- Categories --------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: TxnType


class CategoryOut(BaseModel):
    id: int
    user_id: int
    name: str
    type: TxnType

    model_config = ConfigDict(from_attributes=True)


# ---- Accounts ----------------------------------------------------------------

class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: AccountType
    initial_balance: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    credit_limit: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    statement_closing_day: Optional[int] = Field(default=None, ge=1, le=31)
    payment_due_day: Optional[int] = Field(default=None, ge=1, le=31)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def _billing_days_only_for_cards(self) -> "AccountCreate":
        has_days = self.statement_closing_day is not None or self.payment_due_day is not None
        if self.type == AccountType.CREDIT_CARD:
            if self.statement_closing_day is None or self.payment_due_day is None:
                raise ValueError("credit_card accounts require statement_closing_day and payment_due_day")
        elif has_days:
            raise ValueError("statement_closing_day/payment_due_day are only allowed for credit_card accounts")
        return self


class AccountOut(BaseModel):
    id: int
    user_id: int
    name: str
    type: AccountType
    initial_balance: Decimal
    credit_limit: Optional[Decimal] = None
    statement_closing_day: Optional[int] = None
    payment_due_day: Optional[int] = None
    balance: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


# ---- Transactions ------------------------------------------------------------

class TransactionCreate(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    date: dt.date
    type: TxnType
    account_id: int
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None

    @model_validator(mode="after")
    def _transfer_destination(self) -> "TransactionCreate":
        if self.type == TxnType.TRANSFER:
            if self.destination_account_id is None:
                raise ValueError("transfer requires destination_account_id")
            if self.destination_account_id == self.account_id:
                raise ValueError("destination_account_id must differ from account_id")
        elif self.destination_account_id is not None:
            raise ValueError("destination_account_id is only allowed for transfers")
        return self


class TransactionPatch(BaseModel):
    """Partial update; the merged row is re-validated as a ``TransactionCreate``."""

    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    date: Optional[dt.date] = None
    type: Optional[TxnType] = None
    account_id: Optional[int] = None
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None


class TransactionOut(BaseModel):
    id: int
    user_id: int
    description: str
    amount: Decimal
    date: dt.date
    type: TxnType
    account_id: int
    account_name: Optional[str] = None
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---- Statements --------------------------------------------------------------

class StatementPeriodOut(BaseModel):
    start: dt.date
    end: dt.date

    model_config = ConfigDict(from_attributes=True)


class StatementOut(BaseModel):
    account_id: int
    account_name: str
    statement_total: Decimal = Field(validation_alias=AliasChoices("statement_total", "total"))
    payment_due_date: dt.date = Field(validation_alias=AliasChoices("payment_due_date", "due_date"))
    period: StatementPeriodOut
    transactions: list[TransactionOut]

    model_config = ConfigDict(from_attributes=True)


# ---- Budgets -----------------------------------------------------------------

class BudgetCreate(BaseModel):
    category_id: int
    amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=9999)


class BudgetOut(BaseModel):
    id: int
    user_id: int
    category_id: int
    category_name: Optional[str] = None
    amount: Decimal
    spent_amount: Decimal
    balance: Decimal
    spent_available: bool = True
    month: int
    year: int

    model_config = ConfigDict(from_attributes=True)

