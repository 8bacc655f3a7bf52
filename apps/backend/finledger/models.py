from __future__ import annotations

import datetime as dt
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.database import Base


# NUMERIC(12, 2) everywhere money is stored; asdecimal keeps floats out of the ORM
Money = Numeric(12, 2, asdecimal=True)


def now_utc_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum_column(enum_cls: type[Enum], name: str) -> SAEnum:
    # persist the lowercase values, not the member names
    return SAEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, onupdate=now_utc_naive, nullable=False)


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class TxnType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class User(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))

    accounts: Mapped[list["Account"]] = relationship(back_populates="user")


class Category(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[TxnType] = mapped_column(_enum_column(TxnType, "category_type"), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_name"),)


class Account(Base, TimestampMixin):
    """A place money lives. The balance is never stored; see ``ledger.balance``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[AccountType] = mapped_column(_enum_column(AccountType, "account_type"), nullable=False)
    initial_balance: Mapped[Decimal] = mapped_column(Money, default=Decimal("0.00"), nullable=False)
    credit_limit: Mapped[Decimal | None] = mapped_column(Money)
    statement_closing_day: Mapped[int | None] = mapped_column(Integer)
    payment_due_day: Mapped[int | None] = mapped_column(Integer)

    user: Mapped["User"] = relationship(back_populates="accounts")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_account_name"),
        CheckConstraint(
            "(type = 'credit_card' AND statement_closing_day IS NOT NULL AND payment_due_day IS NOT NULL)"
            " OR (type != 'credit_card' AND statement_closing_day IS NULL AND payment_due_day IS NULL)",
            name="ck_account_billing_days",
        ),
        CheckConstraint(
            "statement_closing_day IS NULL OR (statement_closing_day BETWEEN 1 AND 31)",
            name="ck_account_closing_day_range",
        ),
        CheckConstraint(
            "payment_due_day IS NULL OR (payment_due_day BETWEEN 1 AND 31)",
            name="ck_account_due_day_range",
        ),
        Index("ix_account_user_id", "user_id"),
    )

    @property
    def is_credit_card(self) -> bool:
        return self.type == AccountType.CREDIT_CARD


class Transaction(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    type: Mapped[TxnType] = mapped_column(_enum_column(TxnType, "txn_type"), nullable=False)
    account_id: Mapped[int] = mapped_column(ForeignKey("account.id"), nullable=False)
    destination_account_id: Mapped[int | None] = mapped_column(ForeignKey("account.id"))
    category_id: Mapped[int | None] = mapped_column(ForeignKey("category.id", ondelete="SET NULL"))

    account: Mapped["Account"] = relationship(foreign_keys=[account_id])
    destination_account: Mapped["Account | None"] = relationship(foreign_keys=[destination_account_id])
    category: Mapped["Category | None"] = relationship()

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint(
            "(type = 'transfer' AND destination_account_id IS NOT NULL AND destination_account_id != account_id)"
            " OR (type != 'transfer' AND destination_account_id IS NULL)",
            name="ck_transaction_transfer_destination",
        ),
        Index("ix_transaction_user_id", "user_id"),
        Index("ix_transaction_account_id", "account_id"),
        Index("ix_transaction_destination_account_id", "destination_account_id"),
    )

    @property
    def account_name(self) -> str | None:
        return self.account.name if self.account is not None else None

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category is not None else None


class Budget(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id", ondelete="CASCADE"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    category: Mapped["Category"] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "year", "month", name="uq_budget_span"),
        CheckConstraint("amount >= 0", name="ck_budget_amount_non_negative"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_budget_month_range"),
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category is not None else None
