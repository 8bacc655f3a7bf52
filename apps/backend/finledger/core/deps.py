from __future__ import annotations

from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from finledger.core.config import settings
from finledger.core.database import get_db
from finledger.core.errors import NotFound
from finledger import models
from finledger.ledger import Deadline
from finledger.services import AccountService, BudgetService, SqlLedgerStore


def get_current_user(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)) -> models.User:
    """Resolve the acting user from the ``user_id`` query parameter.

    There is no authentication layer; tests and callers pass the id directly.
    """
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise NotFound.for_entity("user", user_id)
    return user


def get_ledger_store(db: Session = Depends(get_db)) -> SqlLedgerStore:
    return SqlLedgerStore(db)


def get_account_service(store: SqlLedgerStore = Depends(get_ledger_store)) -> AccountService:
    return AccountService(store)


def get_budget_service(store: SqlLedgerStore = Depends(get_ledger_store)) -> BudgetService:
    return BudgetService(store)


def get_deadline() -> Optional[Deadline]:
    timeout = settings.REQUEST_TIMEOUT_SECONDS
    if not timeout or timeout <= 0:
        return None
    return Deadline.after(timeout)
