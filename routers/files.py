from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy import select
from sqlalchemy.orm import selectinload

import storage
from db import SessionLocal
from deps.entities import clean_optional, get_or_404, require_text
from models import File, Folder, Question
from schemas.attachments import FileDetail, FileUpdate, FileWithFolder
from stats import refresh_statistics

router = APIRouter(prefix="/files", tags=["files"])


@router.get("")
def list_files(
    question_id: Optional[str] = Query(default=None, alias="questionId"),
    folder_id: Optional[str] = Query(
        default=None, alias="folderId", description="'null' selects files outside any folder"
    ),
):
    stmt = select(File).options(selectinload(File.folder)).order_by(File.created_at.desc())
    if question_id:
        stmt = stmt.where(File.question_id == question_id)
    if folder_id is not None:
        stmt = stmt.where(File.folder_id.is_(None) if folder_id == "null" else File.folder_id == folder_id)

    with SessionLocal() as db:
        rows = [FileWithFolder.model_validate(f).wire() for f in db.scalars(stmt).all()]

    return {"ok": True, "items": rows, "count": len(rows)}


def _folder_of(db, folder_id: str, question_id: str) -> Folder:
    folder = get_or_404(db, Folder, folder_id, "Folder")
    if folder.question_id != question_id:
        raise HTTPException(status_code=400, detail="Folder belongs to a different question")
    return folder


@router.post("", response_model=FileWithFolder, status_code=201)
def upload_file(
    file: Optional[UploadFile] = None,
    question_id: Optional[str] = Form(default=None, alias="questionId"),
    folder_id: Optional[str] = Form(default=None, alias="folderId"),
    description: Optional[str] = Form(default=None),
    name: Optional[str] = Form(default=None),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")
    question_id = require_text(question_id, "Question ID is required")
    folder_id = clean_optional(folder_id)

    with SessionLocal() as db:
        get_or_404(db, Question, question_id, "Question")
        if folder_id:
            _folder_of(db, folder_id, question_id)

        content = file.file.read()
        path = storage.save_upload(file.filename, content)

        record = File(
            name=clean_optional(name) or file.filename,
            type=storage.file_type_for(file.filename),
            url=str(path),
            size=len(content),
            description=clean_optional(description),
            question_id=question_id,
            folder_id=folder_id,
        )
        db.add(record)
        try:
            db.commit()
        except Exception:
            db.rollback()
            storage.remove_stored(str(path))
            raise
        db.refresh(record)
        out = FileWithFolder.model_validate(record)
        refresh_statistics(db)
        return out


@router.get("/{file_id}", response_model=FileDetail)
def get_file(file_id: str):
    with SessionLocal() as db:
        f = get_or_404(db, File, file_id, "File")
        return FileDetail.model_validate(f)


@router.get("/{file_id}/download")
def download_file(file_id: str):
    with SessionLocal() as db:
        f = get_or_404(db, File, file_id, "File")
        url, name = f.url, f.name

    if not Path(url).is_file():
        raise HTTPException(status_code=404, detail="Stored file is missing")
    return FileResponse(url, filename=name)


@router.patch("/{file_id}", response_model=FileWithFolder)
def update_file(file_id: str, body: FileUpdate):
    with SessionLocal() as db:
        f = get_or_404(db, File, file_id, "File")

        if "folder_id" in body.model_fields_set:
            if body.folder_id is not None:
                _folder_of(db, body.folder_id, f.question_id)
            f.folder_id = body.folder_id
        if body.name is not None:
            f.name = require_text(body.name, "File name is required")
        if body.description is not None:
            f.description = clean_optional(body.description)

        db.commit()
        db.refresh(f)
        return FileWithFolder.model_validate(f)


@router.delete("/{file_id}")
def delete_file(file_id: str):
    with SessionLocal() as db:
        f = get_or_404(db, File, file_id, "File")
        url = f.url

        db.delete(f)
        db.commit()
        # metadata goes regardless of whether the blob could be removed
        storage.remove_stored(url)
        refresh_statistics(db)

    return {"ok": True}
