from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

import settings
import storage
from db import SessionLocal
from deps.entities import clean_optional, commit_or_conflict, conflict, get_or_404, require_text
from models import File, Question, Subject, System
from schemas.catalog import (
    QuestionBrief,
    SubjectCreate,
    SubjectListItem,
    SubjectOut,
    SubjectUpdate,
)
from stats import refresh_statistics

router = APIRouter(prefix="/subjects", tags=["subjects"])

_DUPLICATE = "Subject with this name already exists"


@router.get("")
def list_subjects():
    with SessionLocal() as db:
        subjects = db.scalars(
            select(Subject)
            .options(selectinload(Subject.systems), selectinload(Subject.questions))
            .order_by(Subject.created_at)
        ).all()

        rows = []
        for s in subjects:
            featured = db.scalars(
                select(Question)
                .where(Question.subject_id == s.id)
                .order_by(Question.importance_score.desc(), Question.repeat_count.desc())
                .limit(settings.SUBJECT_PREVIEW_LIMIT)
            ).all()
            item = SubjectListItem.model_validate(s)
            item.featured_questions = [QuestionBrief.model_validate(q) for q in featured]
            rows.append(item.wire())

    return {"ok": True, "items": rows, "count": len(rows)}


@router.post("", response_model=SubjectOut, status_code=201)
def create_subject(body: SubjectCreate):
    name = require_text(body.name, "Subject name is required")

    with SessionLocal() as db:
        if db.scalars(select(Subject).where(Subject.name == name)).first():
            raise conflict(_DUPLICATE)

        subject = Subject(
            name=name,
            description=clean_optional(body.description),
            color=body.color or "#3b82f6",
            icon=body.icon or None,
        )
        db.add(subject)
        commit_or_conflict(db, _DUPLICATE)
        db.refresh(subject)
        out = SubjectOut.model_validate(subject)
        refresh_statistics(db)
        return out


@router.get("/{subject_id}", response_model=SubjectListItem)
def get_subject(subject_id: str):
    with SessionLocal() as db:
        s = get_or_404(db, Subject, subject_id, "Subject")
        return SubjectListItem.model_validate(s)


@router.patch("/{subject_id}", response_model=SubjectOut)
def update_subject(subject_id: str, body: SubjectUpdate):
    changes = body.model_dump(exclude_unset=True)

    with SessionLocal() as db:
        s = get_or_404(db, Subject, subject_id, "Subject")

        if changes.get("name") is not None:
            name = require_text(changes["name"], "Subject name is required")
            if name != s.name:
                clash = db.scalars(select(Subject).where(Subject.name == name)).first()
                if clash and clash.id != s.id:
                    raise conflict(_DUPLICATE)
            s.name = name
        if changes.get("description") is not None:
            s.description = clean_optional(changes["description"])
        if changes.get("color") is not None:
            s.color = changes["color"]
        if changes.get("icon") is not None:
            s.icon = changes["icon"]

        commit_or_conflict(db, _DUPLICATE)
        db.refresh(s)
        return SubjectOut.model_validate(s)


@router.delete("/{subject_id}")
def delete_subject(subject_id: str):
    with SessionLocal() as db:
        s = get_or_404(db, Subject, subject_id, "Subject")
        urls = db.scalars(
            select(File.url)
            .join(Question, File.question_id == Question.id)
            .where(
                or_(
                    Question.subject_id == subject_id,
                    Question.system_id.in_(
                        select(System.id).where(System.subject_id == subject_id)
                    ),
                )
            )
        ).all()

        db.delete(s)
        db.commit()
        storage.remove_many(urls)
        refresh_statistics(db)

    return {"ok": True}
