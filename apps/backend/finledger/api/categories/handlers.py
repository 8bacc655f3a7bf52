from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from finledger import models
from finledger.core.database import get_db
from finledger.core.deps import get_current_user
from finledger.schemas import CategoryCreate


def create_category(
    payload: CategoryCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> models.Category:
    dup = (
        db.query(models.Category)
        .filter(models.Category.user_id == user.id, models.Category.name == payload.name)
        .first()
    )
    if dup:
        raise HTTPException(status_code=409, detail="Category with same name already exists for user")
    cat = models.Category(user_id=user.id, name=payload.name, type=payload.type)
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


def list_categories(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[models.Category]:
    return (
        db.query(models.Category)
        .filter(models.Category.user_id == user.id)
        .order_by(models.Category.name)
        .all()
    )
