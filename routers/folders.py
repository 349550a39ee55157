from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from db import SessionLocal
from deps.entities import commit_or_conflict, conflict, get_or_404, require_text
from models import File, Folder, Question
from schemas.attachments import FolderCreate, FolderDetail, FolderOut, FolderSummary, FolderUpdate

router = APIRouter(prefix="/folders", tags=["folders"])

_DUPLICATE = "Folder with this name already exists"


def _name_taken(db, question_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
    clash = db.scalars(
        select(Folder).where(Folder.question_id == question_id, Folder.name == name)
    ).first()
    return clash is not None and clash.id != exclude_id


@router.get("")
def list_folders(question_id: Optional[str] = Query(default=None, alias="questionId")):
    with SessionLocal() as db:
        stmt = select(Folder).options(selectinload(Folder.files)).order_by(Folder.name.asc())
        if question_id:
            stmt = stmt.where(Folder.question_id == question_id)
        rows = [FolderSummary.model_validate(f).wire() for f in db.scalars(stmt).all()]

    return {"ok": True, "items": rows, "count": len(rows)}


@router.post("", response_model=FolderOut, status_code=201)
def create_folder(body: FolderCreate):
    name = require_text(body.name, "Folder name is required")
    question_id = require_text(body.question_id, "Question ID is required")

    with SessionLocal() as db:
        get_or_404(db, Question, question_id, "Question")
        if _name_taken(db, question_id, name):
            raise conflict(_DUPLICATE)

        folder = Folder(name=name, question_id=question_id)
        db.add(folder)
        commit_or_conflict(db, _DUPLICATE)
        db.refresh(folder)
        return FolderOut.model_validate(folder)


@router.get("/{folder_id}", response_model=FolderDetail)
def get_folder(folder_id: str):
    with SessionLocal() as db:
        f = get_or_404(db, Folder, folder_id, "Folder")
        return FolderDetail.model_validate(f)


@router.patch("/{folder_id}", response_model=FolderOut)
def update_folder(folder_id: str, body: FolderUpdate):
    with SessionLocal() as db:
        f = get_or_404(db, Folder, folder_id, "Folder")
        if body.name is not None:
            name = require_text(body.name, "Folder name is required")
            if name != f.name and _name_taken(db, f.question_id, name, exclude_id=f.id):
                raise conflict(_DUPLICATE)
            f.name = name

        commit_or_conflict(db, _DUPLICATE)
        db.refresh(f)
        return FolderOut.model_validate(f)


@router.delete("/{folder_id}")
def delete_folder(folder_id: str):
    with SessionLocal() as db:
        f = get_or_404(db, Folder, folder_id, "Folder")
        # files outlive their folder
        db.execute(update(File).where(File.folder_id == folder_id).values(folder_id=None))
        db.delete(f)
        db.commit()

    return {"ok": True}
