from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finledger import models
from finledger.core.database import get_db
from finledger.core.deps import get_budget_service, get_current_user, get_deadline
from finledger.core.errors import NotFound
from finledger.ledger import Deadline, budget_period
from finledger.schemas import BudgetCreate, BudgetOut
from finledger.services import BudgetService


def _check_budget(db: Session, user_id: int, payload: BudgetCreate, budget_id: Optional[int] = None) -> None:
    # raises InvalidBillingParameters (400) before anything is written
    budget_period(payload.year, payload.month)

    category = (
        db.query(models.Category)
        .filter(models.Category.id == payload.category_id, models.Category.user_id == user_id)
        .first()
    )
    if not category:
        raise HTTPException(status_code=404, detail="Category not found for this user")
    if category.type != models.TxnType.EXPENSE:
        raise HTTPException(status_code=400, detail="Budgets can only be set for expense categories")

    # one budget per (user, category, month, year)
    q = db.query(models.Budget).filter(
        models.Budget.user_id == user_id,
        models.Budget.category_id == payload.category_id,
        models.Budget.month == payload.month,
        models.Budget.year == payload.year,
    )
    if budget_id is not None:
        q = q.filter(models.Budget.id != budget_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Budget already exists for this period and category")


def _owned_budget(db: Session, user_id: int, budget_id: int) -> models.Budget:
    item = (
        db.query(models.Budget)
        .filter(models.Budget.id == budget_id, models.Budget.user_id == user_id)
        .first()
    )
    if not item:
        raise NotFound.for_entity("budget", budget_id)
    return item


def create_budget(
    payload: BudgetCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: BudgetService = Depends(get_budget_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> BudgetOut:
    _check_budget(db, user.id, payload)
    item = models.Budget(user_id=user.id, **payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return BudgetOut.model_validate(service.get_budget(item.id, user.id, deadline=deadline))


def list_budgets(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=9999),
    user: models.User = Depends(get_current_user),
    service: BudgetService = Depends(get_budget_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> list[BudgetOut]:
    return [BudgetOut.model_validate(b) for b in service.list_budgets(user.id, month, year, deadline=deadline)]


def get_budget(
    budget_id: int,
    user: models.User = Depends(get_current_user),
    service: BudgetService = Depends(get_budget_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> BudgetOut:
    return BudgetOut.model_validate(service.get_budget(budget_id, user.id, deadline=deadline))


def update_budget(
    budget_id: int,
    payload: BudgetCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: BudgetService = Depends(get_budget_service),
    deadline: Optional[Deadline] = Depends(get_deadline),
) -> BudgetOut:
    item = _owned_budget(db, user.id, budget_id)
    _check_budget(db, user.id, payload, budget_id=budget_id)
    for key, value in payload.model_dump().items():
        setattr(item, key, value)
    db.commit()
    return BudgetOut.model_validate(service.get_budget(budget_id, user.id, deadline=deadline))


def delete_budget(
    budget_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    item = _owned_budget(db, user.id, budget_id)
    db.delete(item)
    db.commit()
    return None
