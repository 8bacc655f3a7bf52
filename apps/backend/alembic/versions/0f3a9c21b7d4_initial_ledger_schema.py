"""initial ledger schema

Revision ID: 0f3a9c21b7d4
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0f3a9c21b7d4"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ACCOUNT_TYPES = ("checking", "savings", "credit_card", "other")
TXN_TYPES = ("income", "expense", "transfer")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.Enum(*TXN_TYPES, name="category_type"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_category_name"),
    )

    op.create_table(
        "account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.Enum(*ACCOUNT_TYPES, name="account_type"), nullable=False),
        sa.Column("initial_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=True),
        sa.Column("statement_closing_day", sa.Integer(), nullable=True),
        sa.Column("payment_due_day", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_account_name"),
        sa.CheckConstraint(
            "(type = 'credit_card' AND statement_closing_day IS NOT NULL AND payment_due_day IS NOT NULL)"
            " OR (type != 'credit_card' AND statement_closing_day IS NULL AND payment_due_day IS NULL)",
            name="ck_account_billing_days",
        ),
        sa.CheckConstraint(
            "statement_closing_day IS NULL OR (statement_closing_day BETWEEN 1 AND 31)",
            name="ck_account_closing_day_range",
        ),
        sa.CheckConstraint(
            "payment_due_day IS NULL OR (payment_due_day BETWEEN 1 AND 31)",
            name="ck_account_due_day_range",
        ),
    )
    op.create_index("ix_account_user_id", "account", ["user_id"])

    op.create_table(
        "transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.Enum(*TXN_TYPES, name="txn_type"), nullable=False),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("account.id"), nullable=False),
        sa.Column("destination_account_id", sa.Integer(), sa.ForeignKey("account.id"), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("category.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        sa.CheckConstraint(
            "(type = 'transfer' AND destination_account_id IS NOT NULL AND destination_account_id != account_id)"
            " OR (type != 'transfer' AND destination_account_id IS NULL)",
            name="ck_transaction_transfer_destination",
        ),
    )
    op.create_index("ix_transaction_user_id", "transaction", ["user_id"])
    op.create_index("ix_transaction_account_id", "transaction", ["account_id"])
    op.create_index("ix_transaction_destination_account_id", "transaction", ["destination_account_id"])

    op.create_table(
        "budget",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("category.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "category_id", "year", "month", name="uq_budget_span"),
        sa.CheckConstraint("amount >= 0", name="ck_budget_amount_non_negative"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_budget_month_range"),
    )


def downgrade() -> None:
    op.drop_table("budget")
    op.drop_index("ix_transaction_destination_account_id", table_name="transaction")
    op.drop_index("ix_transaction_account_id", table_name="transaction")
    op.drop_index("ix_transaction_user_id", table_name="transaction")
    op.drop_table("transaction")
    op.drop_index("ix_account_user_id", table_name="account")
    op.drop_table("account")
    op.drop_table("category")
    op.drop_table("user")
