from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

import settings
import storage
from db import SessionLocal
from deps.entities import clean_optional, get_or_404, require_text
from models import File, MarksSection, Question, Subject, System
from schemas.questions import (
    QuestionCreate,
    QuestionDetail,
    QuestionListItem,
    QuestionOut,
    QuestionUpdate,
)
from scoring import clamp_importance, derive_metrics, dump_years, parse_years
from stats import refresh_statistics

router = APIRouter(tags=["questions"])

_ORDERABLE = {
    "importanceScore": Question.importance_score,
    "repeatCount": Question.repeat_count,
    "createdAt": Question.created_at,
    "title": Question.title,
}

_LIST_OPTIONS = (
    selectinload(Question.subject),
    selectinload(Question.system),
    selectinload(Question.marks_section),
    selectinload(Question.files),
)


def _check_parents(
    db,
    subject_id: Optional[str] = None,
    system_id: Optional[str] = None,
    marks_section_id: Optional[str] = None,
) -> None:
    if subject_id:
        get_or_404(db, Subject, subject_id, "Subject")
    if system_id:
        get_or_404(db, System, system_id, "System")
    if marks_section_id:
        get_or_404(db, MarksSection, marks_section_id, "Marks section")


@router.get("/questions")
def list_questions(
    subject_id: Optional[str] = Query(default=None, alias="subjectId"),
    system_id: Optional[str] = Query(default=None, alias="systemId"),
    marks_section_id: Optional[str] = Query(default=None, alias="marksSectionId"),
    bookmarked: Optional[bool] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    order_by: str = Query(default="importanceScore", alias="orderBy"),
    order_dir: str = Query(default="desc", alias="orderDir"),
):
    stmt = select(Question).options(*_LIST_OPTIONS)
    if subject_id:
        stmt = stmt.where(Question.subject_id == subject_id)
    if system_id:
        stmt = stmt.where(Question.system_id == system_id)
    if marks_section_id:
        stmt = stmt.where(Question.marks_section_id == marks_section_id)
    if bookmarked is not None:
        stmt = stmt.where(Question.is_bookmarked.is_(bookmarked))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(Question.title.ilike(pattern), Question.description.ilike(pattern))
        )

    # unknown sort keys fall back to newest first
    column = _ORDERABLE.get(order_by)
    if column is not None:
        stmt = stmt.order_by(column.asc() if order_dir == "asc" else column.desc())
    stmt = stmt.order_by(Question.created_at.desc())

    if limit is not None:
        stmt = stmt.limit(limit)

    with SessionLocal() as db:
        rows = [QuestionListItem.model_validate(q).wire() for q in db.scalars(stmt).all()]

    return {"ok": True, "items": rows, "count": len(rows)}


@router.get("/featured")
def featured_questions(
    subject_id: Optional[str] = Query(default=None, alias="subjectId"),
    system_id: Optional[str] = Query(default=None, alias="systemId"),
    limit: int = Query(default=settings.FEATURED_DEFAULT_LIMIT, ge=1),
):
    stmt = (
        select(Question)
        .options(*_LIST_OPTIONS)
        .order_by(
            Question.importance_score.desc(),
            Question.repeat_count.desc(),
            Question.created_at.desc(),
        )
        .limit(limit)
    )
    if subject_id:
        stmt = stmt.where(Question.subject_id == subject_id)
    if system_id:
        stmt = stmt.where(Question.system_id == system_id)

    with SessionLocal() as db:
        rows = [QuestionListItem.model_validate(q).wire() for q in db.scalars(stmt).all()]

    return {"ok": True, "items": rows, "count": len(rows)}


@router.post("/questions", response_model=QuestionOut, status_code=201)
def create_question(body: QuestionCreate):
    title = require_text(body.title, "Question title is required")
    if not (body.subject_id and body.system_id and body.marks_section_id):
        raise HTTPException(
            status_code=400, detail="Subject, System, and Marks Section are required"
        )

    global_importance = clamp_importance(body.global_importance)
    # any client-supplied repeatCount/importanceScore is ignored
    repeat_count, score = derive_metrics(body.years, global_importance)

    with SessionLocal() as db:
        _check_parents(db, body.subject_id, body.system_id, body.marks_section_id)

        q = Question(
            title=title,
            description=clean_optional(body.description),
            years=dump_years(body.years),
            repeat_count=repeat_count,
            importance_score=score,
            global_importance=global_importance,
            notes=clean_optional(body.notes),
            is_bookmarked=body.is_bookmarked,
            subject_id=body.subject_id,
            system_id=body.system_id,
            marks_section_id=body.marks_section_id,
        )
        db.add(q)
        db.commit()
        db.refresh(q)
        out = QuestionOut.model_validate(q)
        refresh_statistics(db)
        return out


@router.get("/questions/{qid}", response_model=QuestionDetail)
def get_question_detail(qid: str):
    with SessionLocal() as db:
        q = get_or_404(db, Question, qid, "Question")
        return QuestionDetail.model_validate(q)


@router.patch("/questions/{qid}", response_model=QuestionOut)
def update_question(qid: str, body: QuestionUpdate):
    changes = body.model_dump(exclude_unset=True)

    with SessionLocal() as db:
        q = get_or_404(db, Question, qid, "Question")
        _check_parents(
            db,
            changes.get("subject_id"),
            changes.get("system_id"),
            changes.get("marks_section_id"),
        )

        years = changes["years"] if changes.get("years") is not None else parse_years(q.years)
        global_importance = (
            clamp_importance(changes["global_importance"])
            if changes.get("global_importance") is not None
            else q.global_importance
        )
        q.years = dump_years(years)
        q.global_importance = global_importance
        q.repeat_count, q.importance_score = derive_metrics(years, global_importance)

        if changes.get("title") is not None:
            q.title = require_text(changes["title"], "Question title is required")
        for key in ("description", "notes"):
            if changes.get(key) is not None:
                setattr(q, key, clean_optional(changes[key]))
        for key in ("is_bookmarked", "subject_id", "system_id", "marks_section_id"):
            if changes.get(key) is not None:
                setattr(q, key, changes[key])

        db.commit()
        db.refresh(q)
        return QuestionOut.model_validate(q)


@router.delete("/questions/{qid}")
def delete_question(qid: str):
    with SessionLocal() as db:
        q = get_or_404(db, Question, qid, "Question")
        urls = db.scalars(select(File.url).where(File.question_id == qid)).all()

        db.delete(q)
        db.commit()
        storage.remove_many(urls)
        refresh_statistics(db)

    return {"ok": True}
