"""Account handlers: CRUD with derived balance, and credit card statements."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
import structlog

from finledger import models
from finledger.core.database import get_db
from finledger.core.deps import get_account_service, get_current_user, get_deadline
from finledger.core.errors import NotFound
from finledger.ledger import Deadline
from finledger.schemas import AccountCreate, AccountOut, StatementOut
from finledger.services import AccountService


logger = structlog.get_logger(__name__)


def create_account(
    payload: AccountCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AccountOut:
    exists = (
        db.query(models.Account)
        .filter(models.Account.user_id == user.id, models.Account.name == payload.name)
        .first()
    )
    if exists:
        raise HTTPException(status_code=409, detail="Account with same name already exists for user")

    account = models.Account(user_id=user.id, **payload.model_dump())
    db.add(account)
    db.commit()
    db.refresh(account)
    # nothing has touched a brand new account yet
    return AccountOut.model_validate(account).model_copy(update={"balance": account.initial_balance})


def list_accounts(
    user: models.User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> list[AccountOut]:
    rows = service.list_accounts(user.id, deadline=deadline)
    return [
        AccountOut.model_validate(account).model_copy(update={"balance": balance})
        for account, balance in rows
    ]


def get_account(
    account_id: int,
    user: models.User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> AccountOut:
    account, balance = service.get_account(account_id, user.id, deadline=deadline)
    return AccountOut.model_validate(account).model_copy(update={"balance": balance})


def get_account_statement(
    account_id: int,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user: models.User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> StatementOut:
    # defaults to the statement closing in the current month
    today = date.today()
    report = service.get_statement(
        account_id,
        user.id,
        year if year is not None else today.year,
        month if month is not None else today.month,
        deadline=deadline,
    )
    return StatementOut.model_validate(report)


def _owned(db: Session, user_id: int, account_id: int) -> models.Account:
    account = (
        db.query(models.Account)
        .filter(models.Account.id == account_id, models.Account.user_id == user_id)
        .first()
    )
    if not account:
        raise NotFound.for_entity("account", account_id)
    return account


def update_account(
    account_id: int,
    payload: AccountCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> AccountOut:
    account = _owned(db, user.id, account_id)
    clash = (
        db.query(models.Account)
        .filter(
            models.Account.user_id == user.id,
            models.Account.name == payload.name,
            models.Account.id != account_id,
        )
        .first()
    )
    if clash:
        raise HTTPException(status_code=409, detail="Account with same name already exists for user")

    for key, value in payload.model_dump().items():
        setattr(account, key, value)
    db.commit()

    account_snapshot, balance = service.get_account(account_id, user.id, deadline=deadline)
    return AccountOut.model_validate(account_snapshot).model_copy(update={"balance": balance})


def delete_account(
    account_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    account = _owned(db, user.id, account_id)
    # transfers into the account go with it, otherwise the FK would dangle
    removed = (
        db.query(models.Transaction)
        .filter(
            models.Transaction.user_id == user.id,
            or_(
                models.Transaction.account_id == account_id,
                models.Transaction.destination_account_id == account_id,
            ),
        )
        .delete(synchronize_session=False)
    )
    db.delete(account)
    db.commit()
    logger.info("account_deleted", account_id=account_id, user_id=user.id, transactions_removed=removed)
    return None
