from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

import storage
from db import SessionLocal
from deps.entities import clean_optional, commit_or_conflict, conflict, get_or_404, require_text
from models import File, MarksSection, Question, Subject, System
from schemas.catalog import SystemCreate, SystemDetail, SystemListItem, SystemOut, SystemUpdate
from stats import refresh_statistics

router = APIRouter(prefix="/systems", tags=["systems"])

_DUPLICATE = "System with this name already exists in this subject"


def _name_taken(db, subject_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
    clash = db.scalars(
        select(System).where(System.subject_id == subject_id, System.name == name)
    ).first()
    return clash is not None and clash.id != exclude_id


@router.get("")
def list_systems(subject_id: Optional[str] = Query(default=None, alias="subjectId")):
    with SessionLocal() as db:
        stmt = (
            select(System)
            .options(
                selectinload(System.subject),
                selectinload(System.questions),
                selectinload(System.marks_sections).selectinload(MarksSection.questions),
            )
            .order_by(System.order.asc(), System.created_at.asc())
        )
        if subject_id:
            stmt = stmt.where(System.subject_id == subject_id)

        rows = []
        for s in db.scalars(stmt).all():
            rows.append(SystemListItem.model_validate(s).wire())

    return {"ok": True, "items": rows, "count": len(rows)}


@router.post("", response_model=SystemOut, status_code=201)
def create_system(body: SystemCreate):
    name = require_text(body.name, "System name is required")
    subject_id = require_text(body.subject_id, "Subject ID is required")

    with SessionLocal() as db:
        get_or_404(db, Subject, subject_id, "Subject")
        if _name_taken(db, subject_id, name):
            raise conflict(_DUPLICATE)

        order = body.order
        if order is None:
            current = db.scalar(
                select(func.max(System.order)).where(System.subject_id == subject_id)
            )
            order = (current if current is not None else -1) + 1

        system = System(
            name=name,
            description=clean_optional(body.description),
            order=order,
            subject_id=subject_id,
        )
        db.add(system)
        commit_or_conflict(db, _DUPLICATE)
        db.refresh(system)
        out = SystemOut.model_validate(system)
        refresh_statistics(db)
        return out


@router.get("/{system_id}", response_model=SystemDetail)
def get_system(system_id: str):
    with SessionLocal() as db:
        s = get_or_404(db, System, system_id, "System")
        return SystemDetail.model_validate(s)


@router.patch("/{system_id}", response_model=SystemOut)
def update_system(system_id: str, body: SystemUpdate):
    changes = body.model_dump(exclude_unset=True)

    with SessionLocal() as db:
        s = get_or_404(db, System, system_id, "System")

        target_subject = changes.get("subject_id") or s.subject_id
        if target_subject != s.subject_id:
            get_or_404(db, Subject, target_subject, "Subject")

        name = s.name
        if changes.get("name") is not None:
            name = require_text(changes["name"], "System name is required")
        if (name != s.name or target_subject != s.subject_id) and _name_taken(
            db, target_subject, name, exclude_id=s.id
        ):
            raise conflict(_DUPLICATE)

        s.name = name
        s.subject_id = target_subject
        if changes.get("description") is not None:
            s.description = clean_optional(changes["description"])
        if changes.get("order") is not None:
            s.order = changes["order"]

        commit_or_conflict(db, _DUPLICATE)
        db.refresh(s)
        return SystemOut.model_validate(s)


@router.delete("/{system_id}")
def delete_system(system_id: str):
    with SessionLocal() as db:
        s = get_or_404(db, System, system_id, "System")
        urls = db.scalars(
            select(File.url)
            .join(Question, File.question_id == Question.id)
            .where(
                or_(
                    Question.system_id == system_id,
                    Question.marks_section_id.in_(
                        select(MarksSection.id).where(MarksSection.system_id == system_id)
                    ),
                )
            )
        ).all()

        db.delete(s)
        db.commit()
        storage.remove_many(urls)
        refresh_statistics(db)

    return {"ok": True}
