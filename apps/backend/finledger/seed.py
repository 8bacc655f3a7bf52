from __future__ import annotations

from sqlalchemy.orm import Session

from .core.database import SessionLocal
from .models import Category, TxnType, User


DEFAULT_CATEGORIES: tuple[tuple[str, TxnType], ...] = (
    ("Salary", TxnType.INCOME),
    ("Groceries", TxnType.EXPENSE),
    ("Housing", TxnType.EXPENSE),
    ("Transport", TxnType.EXPENSE),
    ("Card payment", TxnType.TRANSFER),
)


def seed_user(db: Session, email: str = "demo@example.com", name: str = "Demo") -> User:
    """Create the demo user and its default categories; idempotent."""
    user = db.query(User).filter_by(email=email).first()
    if not user:
        user = User(email=email, name=name)
        db.add(user)
        db.flush()

    for cat_name, cat_type in DEFAULT_CATEGORIES:
        exists = db.query(Category).filter_by(user_id=user.id, name=cat_name).first()
        if not exists:
            db.add(Category(user_id=user.id, name=cat_name, type=cat_type))
    db.flush()
    return user


def seed() -> None:
    db: Session = SessionLocal()
    try:
        seed_user(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
