"""Transaction handlers.

The engine never writes; creating, editing and deleting rows lives here and
every derived figure is recomputed on the next read.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from finledger import models
from finledger.core.database import get_db
from finledger.core.deps import get_current_user, get_deadline, get_ledger_store
from finledger.ledger import Deadline, TransactionFilter
from finledger.ledger.deadline import check_deadline
from finledger.schemas import TransactionCreate, TransactionOut, TransactionPatch
from finledger.services import SqlLedgerStore


def _owned_account(db: Session, user_id: int, account_id: int, field: str) -> models.Account:
    account = (
        db.query(models.Account)
        .filter(models.Account.id == account_id, models.Account.user_id == user_id)
        .first()
    )
    if not account:
        raise HTTPException(status_code=400, detail=f"{field} does not reference an account of this user")
    return account


def _check_references(db: Session, user_id: int, payload: TransactionCreate) -> None:
    _owned_account(db, user_id, payload.account_id, "account_id")
    if payload.destination_account_id is not None:
        _owned_account(db, user_id, payload.destination_account_id, "destination_account_id")
    if payload.category_id is not None:
        category = (
            db.query(models.Category)
            .filter(models.Category.id == payload.category_id, models.Category.user_id == user_id)
            .first()
        )
        if not category:
            raise HTTPException(status_code=400, detail="category_id does not reference a category of this user")


def _owned_transaction(db: Session, user_id: int, txn_id: int) -> models.Transaction:
    tx = (
        db.query(models.Transaction)
        .filter(models.Transaction.id == txn_id, models.Transaction.user_id == user_id)
        .first()
    )
    if not tx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return tx


def create_transaction(
    payload: TransactionCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TransactionOut:
    _check_references(db, user.id, payload)
    tx = models.Transaction(user_id=user.id, **payload.model_dump())
    db.add(tx)
    db.commit()
    db.refresh(tx)
    return TransactionOut.model_validate(tx)


def list_transactions(
    account_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    type: Optional[models.TxnType] = Query(None),
    category_id: Optional[list[int]] = Query(None),
    description: Optional[str] = Query(None, max_length=255),
    user: models.User = Depends(get_current_user),
    store: SqlLedgerStore = Depends(get_ledger_store),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> list[TransactionOut]:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    filters = TransactionFilter(
        account_id=account_id,
        start=start_date,
        end=end_date,
        type=type,
        category_ids=tuple(category_id or ()),
        description=description,
    )
    check_deadline(deadline, "fetch_transactions")
    return [TransactionOut.model_validate(e) for e in store.fetch_transactions(user.id, filters)]


def delete_transaction(
    txn_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    tx = _owned_transaction(db, user.id, txn_id)
    db.delete(tx)
    db.commit()
    return None


def get_transaction(
    txn_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TransactionOut:
    return TransactionOut.model_validate(_owned_transaction(db, user.id, txn_id))


def _apply(db: Session, user_id: int, tx: models.Transaction, payload: TransactionCreate) -> TransactionOut:
    _check_references(db, user_id, payload)
    for key, value in payload.model_dump().items():
        setattr(tx, key, value)
    db.commit()
    db.refresh(tx)
    return TransactionOut.model_validate(tx)


def update_transaction(
    txn_id: int,
    payload: TransactionCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TransactionOut:
    tx = _owned_transaction(db, user.id, txn_id)
    return _apply(db, user.id, tx, payload)


def patch_transaction(
    txn_id: int,
    payload: TransactionPatch,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TransactionOut:
    tx = _owned_transaction(db, user.id, txn_id)
    changes = payload.model_dump(exclude_unset=True)
    merged = {
        "description": tx.description,
        "amount": tx.amount,
        "date": tx.date,
        "type": tx.type,
        "account_id": tx.account_id,
        "destination_account_id": tx.destination_account_id,
        "category_id": tx.category_id,
    }
    merged.update(changes)
    # switching away from transfer drops the destination unless it was sent explicitly
    if merged["type"] != models.TxnType.TRANSFER and "destination_account_id" not in changes:
        merged["destination_account_id"] = None

    try:
        full = TransactionCreate.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()],
        ) from exc
    return _apply(db, user.id, tx, full)
