"""
StatementBuilder tests
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finledger.core.errors import InvalidAccountType, MissingBillingConfig, NotFound, UpstreamFailure
from finledger.ledger import AccountSnapshot, LedgerEntry, StatementBuilder, TransactionFilter, statement_total
from finledger.models import AccountType, TxnType


CARD = AccountSnapshot(
    id=5,
    user_id=1,
    name="Visa",
    type=AccountType.CREDIT_CARD,
    credit_limit=Decimal("5000.00"),
    statement_closing_day=31,
    payment_due_day=10,
)


def _entry(id, type, amount, account_id=5, destination_account_id=None, day=date(2025, 4, 2)):
    return LedgerEntry(
        id=id,
        user_id=1,
        description=f"tx {id}",
        amount=Decimal(amount),
        date=day,
        type=type,
        account_id=account_id,
        destination_account_id=destination_account_id,
    )


class TestStatementBuilder:
    @pytest.fixture
    def store(self):
        store = MagicMock()
        store.fetch_account.return_value = CARD
        store.fetch_transactions.return_value = [
            _entry(1, TxnType.EXPENSE, "100.10"),
            _entry(2, TxnType.EXPENSE, "0.20"),
            _entry(3, TxnType.INCOME, "15.00"),  # refund
            _entry(4, TxnType.TRANSFER, "300.00", account_id=9, destination_account_id=5),  # payment
        ]
        return store

    @pytest.fixture
    def builder(self, store):
        return StatementBuilder(store)

    def test_builds_report_for_april(self, builder, store):
        report = builder.build(CARD, 2025, 4)

        assert report.account_name == "Visa"
        assert report.period.start == date(2025, 3, 31)
        assert report.period.end == date(2025, 4, 30)
        assert report.due_date == date(2025, 4, 10)
        assert report.total == Decimal("100.30")
        # every row is listed, only expenses are totalled
        assert [t.id for t in report.transactions] == [1, 2, 3, 4]
        store.fetch_transactions.assert_called_once_with(
            1, TransactionFilter(account_id=5, start=date(2025, 3, 31), end=date(2025, 4, 30))
        )

    def test_non_credit_card_fails_before_touching_store(self, builder, store):
        checking = AccountSnapshot(id=6, user_id=1, name="Checking", type=AccountType.CHECKING)
        with pytest.raises(InvalidAccountType):
            builder.build(checking, 2025, 4)
        store.fetch_transactions.assert_not_called()

    def test_missing_billing_config(self, builder, store):
        broken = CARD.model_copy(update={"payment_due_day": None})
        with pytest.raises(MissingBillingConfig):
            builder.build(broken, 2025, 4)
        store.fetch_transactions.assert_not_called()

    def test_build_for_fetches_account_first(self, builder, store):
        report = builder.build_for(5, 1, 2025, 1)
        store.fetch_account.assert_called_once_with(5, 1)
        assert report.period.start == date(2024, 12, 31)
        assert report.period.end == date(2025, 1, 31)

    def test_build_for_propagates_not_found(self, builder, store):
        store.fetch_account.side_effect = NotFound.for_entity("account", 5)
        with pytest.raises(NotFound):
            builder.build_for(5, 1, 2025, 4)

    def test_store_failure_is_fatal(self, builder, store):
        store.fetch_transactions.side_effect = UpstreamFailure("fetch_transactions failed")
        with pytest.raises(UpstreamFailure):
            builder.build(CARD, 2025, 4)

    def test_empty_period_has_zero_total(self, builder, store):
        store.fetch_transactions.return_value = []
        report = builder.build(CARD, 2024, 2)
        assert report.total == Decimal("0")
        assert report.transactions == ()
        assert report.period.end == date(2024, 2, 29)


def test_statement_total_ignores_expenses_of_other_accounts():
    rows = [
        _entry(1, TxnType.EXPENSE, "10.00"),
        _entry(2, TxnType.EXPENSE, "99.00", account_id=8),
    ]
    assert statement_total(5, rows) == Decimal("10.00")
