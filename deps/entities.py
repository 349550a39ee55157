from __future__ import annotations

from typing import Optional, Type, TypeVar

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

T = TypeVar("T")


def get_or_404(db: Session, model: Type[T], entity_id: str, label: str) -> T:
    obj = db.get(model, entity_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def require_text(value: Optional[str], message: str) -> str:
    """Trimmed non-blank string or a 400 with ``message``."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise HTTPException(status_code=400, detail=message)
    return value.strip()


def clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def conflict(message: str) -> HTTPException:
    return HTTPException(status_code=409, detail=message)


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Commit, mapping a storage-level uniqueness violation to 409.

    The application checks uniqueness before writing, but two concurrent
    creators can both pass that check; the unique constraint is the final guard.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict(message)
