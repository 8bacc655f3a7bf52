from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from finledger import models
from finledger.core.errors import NotFound, UpstreamFailure
from finledger.ledger import TransactionFilter
from finledger.services import SqlLedgerStore


@pytest.fixture()
def ledger(db_session, demo_user):
    """Two accounts, one expense category and a handful of rows around March 2025."""
    checking = models.Account(user_id=demo_user.id, name="Checking", type=models.AccountType.CHECKING, initial_balance=Decimal("100.00"))
    card = models.Account(
        user_id=demo_user.id,
        name="Card",
        type=models.AccountType.CREDIT_CARD,
        statement_closing_day=25,
        payment_due_day=5,
    )
    db_session.add_all([checking, card])
    db_session.flush()
    groceries = db_session.query(models.Category).filter_by(user_id=demo_user.id, name="Groceries").one()

    def tx(description, amount, day, type, account, destination=None, category=None):
        return models.Transaction(
            user_id=demo_user.id,
            description=description,
            amount=Decimal(amount),
            date=day,
            type=type,
            account_id=account.id,
            destination_account_id=destination.id if destination else None,
            category_id=category.id if category else None,
        )

    db_session.add_all(
        [
            tx("Market", "40.10", date(2025, 2, 28), models.TxnType.EXPENSE, card, category=groceries),
            tx("Bakery", "10.20", date(2025, 3, 1), models.TxnType.EXPENSE, card, category=groceries),
            tx("Butcher", "0.30", date(2025, 3, 31), models.TxnType.EXPENSE, checking, category=groceries),
            tx("Next month", "99.00", date(2025, 4, 1), models.TxnType.EXPENSE, card, category=groceries),
            tx("Card payment", "50.00", date(2025, 3, 10), models.TxnType.TRANSFER, checking, destination=card),
            tx("Paycheck", "1000.00", date(2025, 3, 5), models.TxnType.INCOME, checking),
        ]
    )
    db_session.commit()
    return {"user": demo_user, "checking": checking, "card": card, "groceries": groceries}


def test_fetch_account_scoped_by_user(db_session, ledger):
    store = SqlLedgerStore(db_session)
    snap = store.fetch_account(ledger["card"].id, ledger["user"].id)
    assert snap.name == "Card"
    assert snap.statement_closing_day == 25
    with pytest.raises(NotFound):
        store.fetch_account(ledger["card"].id, ledger["user"].id + 100)


def test_fetch_transactions_matches_source_and_destination(db_session, ledger):
    store = SqlLedgerStore(db_session)
    rows = store.fetch_transactions(ledger["user"].id, TransactionFilter(account_id=ledger["card"].id))
    descriptions = {r.description for r in rows}
    assert descriptions == {"Market", "Bakery", "Next month", "Card payment"}
    # newest first
    assert rows[0].description == "Next month"


def test_fetch_transactions_inclusive_date_range(db_session, ledger):
    store = SqlLedgerStore(db_session)
    rows = store.fetch_transactions(
        ledger["user"].id,
        TransactionFilter(start=date(2025, 3, 1), end=date(2025, 3, 31)),
    )
    assert {r.description for r in rows} == {"Bakery", "Butcher", "Card payment", "Paycheck"}


def test_fetch_transactions_type_category_and_description(db_session, ledger):
    store = SqlLedgerStore(db_session)
    user_id = ledger["user"].id
    assert {r.description for r in store.fetch_transactions(user_id, TransactionFilter(type=models.TxnType.INCOME))} == {"Paycheck"}
    by_cat = store.fetch_transactions(user_id, TransactionFilter(category_ids=(ledger["groceries"].id,)))
    assert len(by_cat) == 4
    assert all(r.category_name == "Groceries" for r in by_cat)
    assert [r.description for r in store.fetch_transactions(user_id, TransactionFilter(description="bak"))] == ["Bakery"]


def test_sum_expenses_half_open_range(db_session, ledger):
    store = SqlLedgerStore(db_session)
    total = store.sum_expenses(ledger["user"].id, ledger["groceries"].id, date(2025, 3, 1), date(2025, 4, 1))
    assert total == Decimal("10.50")


def test_sum_expenses_without_rows_is_zero(db_session, ledger):
    store = SqlLedgerStore(db_session)
    total = store.sum_expenses(ledger["user"].id, ledger["groceries"].id, date(2024, 1, 1), date(2024, 2, 1))
    assert total == Decimal("0")


def test_budgets_by_period_and_id(db_session, ledger):
    budget = models.Budget(
        user_id=ledger["user"].id,
        category_id=ledger["groceries"].id,
        amount=Decimal("200.00"),
        month=3,
        year=2025,
    )
    db_session.add(budget)
    db_session.commit()

    store = SqlLedgerStore(db_session)
    listed = store.list_budgets(ledger["user"].id, 3, 2025)
    assert [b.id for b in listed] == [budget.id]
    assert listed[0].category_name == "Groceries"
    assert store.list_budgets(ledger["user"].id, 4, 2025) == []
    assert store.fetch_budget(budget.id, ledger["user"].id).amount == Decimal("200.00")
    with pytest.raises(NotFound):
        store.fetch_budget(budget.id + 1, ledger["user"].id)


def test_driver_errors_become_upstream_failure():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("database is locked"))
    store = SqlLedgerStore(db)
    with pytest.raises(UpstreamFailure) as excinfo:
        store.sum_expenses(1, 1, date(2025, 1, 1), date(2025, 2, 1))
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_engine_enforces_ledger_constraints(engine, db_session, ledger):
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1

    db_session.add(
        models.Transaction(
            user_id=ledger["user"].id,
            description="Ghost",
            amount=Decimal("1.00"),
            date=date(2025, 3, 1),
            type=models.TxnType.EXPENSE,
            account_id=987654,
        )
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
