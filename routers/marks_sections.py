from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import selectinload

import storage
from db import SessionLocal
from deps.entities import commit_or_conflict, conflict, get_or_404, require_text
from models import File, MarksSection, Question, System
from schemas.catalog import (
    MarksSectionCreate,
    MarksSectionListItem,
    MarksSectionOut,
    MarksSectionUpdate,
)
from schemas.questions import MarksSectionDetail
from stats import refresh_statistics

router = APIRouter(prefix="/marks-sections", tags=["marks-sections"])


def default_label(marks: int) -> str:
    return f"{marks} Markers"


def _duplicate(marks: int) -> str:
    return f"Marks section with {marks} marks already exists in this system"


def _marks_taken(db, system_id: str, marks: int, exclude_id: Optional[str] = None) -> bool:
    clash = db.scalars(
        select(MarksSection).where(MarksSection.system_id == system_id, MarksSection.marks == marks)
    ).first()
    return clash is not None and clash.id != exclude_id


def _check_marks(marks: Optional[int]) -> int:
    if marks is None or marks <= 0:
        raise HTTPException(status_code=400, detail="Marks value is required")
    return marks


@router.get("")
def list_marks_sections(system_id: Optional[str] = Query(default=None, alias="systemId")):
    with SessionLocal() as db:
        stmt = (
            select(MarksSection)
            .options(
                selectinload(MarksSection.system).selectinload(System.subject),
                selectinload(MarksSection.questions),
            )
            .order_by(MarksSection.marks.desc())
        )
        if system_id:
            stmt = stmt.where(MarksSection.system_id == system_id)
        rows = [MarksSectionListItem.model_validate(m).wire() for m in db.scalars(stmt).all()]

    return {"ok": True, "items": rows, "count": len(rows)}


@router.post("", response_model=MarksSectionOut, status_code=201)
def create_marks_section(body: MarksSectionCreate):
    marks = _check_marks(body.marks)
    system_id = require_text(body.system_id, "System ID is required")

    with SessionLocal() as db:
        get_or_404(db, System, system_id, "System")
        if _marks_taken(db, system_id, marks):
            raise conflict(_duplicate(marks))

        section = MarksSection(
            marks=marks,
            label=(body.label or "").strip() or default_label(marks),
            system_id=system_id,
        )
        db.add(section)
        commit_or_conflict(db, _duplicate(marks))
        db.refresh(section)
        return MarksSectionOut.model_validate(section)


@router.get("/{section_id}", response_model=MarksSectionDetail)
def get_marks_section(section_id: str):
    with SessionLocal() as db:
        m = get_or_404(db, MarksSection, section_id, "Marks section")
        return MarksSectionDetail.model_validate(m)


@router.patch("/{section_id}", response_model=MarksSectionOut)
def update_marks_section(section_id: str, body: MarksSectionUpdate):
    changes = body.model_dump(exclude_unset=True)

    with SessionLocal() as db:
        m = get_or_404(db, MarksSection, section_id, "Marks section")

        target_system = changes.get("system_id") or m.system_id
        if target_system != m.system_id:
            get_or_404(db, System, target_system, "System")

        marks = m.marks
        if changes.get("marks") is not None:
            marks = _check_marks(changes["marks"])
        if (marks != m.marks or target_system != m.system_id) and _marks_taken(
            db, target_system, marks, exclude_id=m.id
        ):
            raise conflict(_duplicate(marks))

        m.marks = marks
        m.system_id = target_system
        if changes.get("label") is not None:
            m.label = changes["label"].strip() or default_label(marks)

        commit_or_conflict(db, _duplicate(marks))
        db.refresh(m)
        return MarksSectionOut.model_validate(m)


@router.delete("/{section_id}")
def delete_marks_section(section_id: str):
    with SessionLocal() as db:
        m = get_or_404(db, MarksSection, section_id, "Marks section")
        urls = db.scalars(
            select(File.url)
            .join(Question, File.question_id == Question.id)
            .where(Question.marks_section_id == section_id)
        ).all()

        db.delete(m)
        db.commit()
        storage.remove_many(urls)
        # cascaded questions and files change the totals
        refresh_statistics(db)

    return {"ok": True}
