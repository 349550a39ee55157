"""JSON export and import of the whole catalog."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

import settings
from models import (
    STATISTICS_ID,
    File,
    Folder,
    MarksSection,
    Question,
    Statistics,
    Subject,
    System,
)
from schemas.attachments import FileOut, FolderOut
from schemas.backup import (
    BackupData,
    BackupRecord,
    FileRecord,
    FolderRecord,
    ImportResult,
    MarksSectionRecord,
    QuestionRecord,
    SubjectRecord,
    SystemRecord,
)
from schemas.base import CamelModel
from schemas.catalog import MarksSectionOut, SubjectOut, SystemOut
from schemas.questions import QuestionOut
from schemas.stats import StatisticsOut
from scoring import clamp_importance, derive_metrics, dump_years
from stats import refresh_statistics

logger = logging.getLogger(__name__)

# parents before children; replace mode deletes in the reverse order
_ENTITIES: List[Tuple[str, str, Type[BackupRecord], Any, Type[CamelModel]]] = [
    ("subjects", "Subject", SubjectRecord, Subject, SubjectOut),
    ("systems", "System", SystemRecord, System, SystemOut),
    ("marks_sections", "MarksSection", MarksSectionRecord, MarksSection, MarksSectionOut),
    ("questions", "Question", QuestionRecord, Question, QuestionOut),
    ("folders", "Folder", FolderRecord, Folder, FolderOut),
    ("files", "File", FileRecord, File, FileOut),
]


def _dump(schema: Type[CamelModel], rows) -> List[Dict[str, Any]]:
    return [schema.model_validate(r).model_dump(by_alias=True, mode="json") for r in rows]


def export_backup(db: Session) -> Dict[str, Any]:
    data: Dict[str, List[Dict[str, Any]]] = {}
    counts: Dict[str, int] = {}
    for key, _label, _record, model, schema in _ENTITIES:
        rows = db.scalars(select(model).order_by(model.created_at)).all()
        camel = to_camel(key)
        data[camel] = _dump(schema, rows)
        counts[camel] = len(rows)

    stats = db.get(Statistics, STATISTICS_ID)
    return {
        "version": settings.BACKUP_VERSION,
        "exportedAt": datetime.now(UTC).isoformat(),
        "statistics": (
            StatisticsOut.model_validate(stats).model_dump(by_alias=True, mode="json")
            if stats
            else None
        ),
        "counts": counts,
        "data": data,
    }


def write_backup_file(document: Dict[str, Any], directory: Optional[Path] = None) -> Path:
    directory = Path(directory) if directory is not None else settings.BACKUP_DIR
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    path = directory / f"question-bank-backup-{stamp}.json"
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def _columns(record: BackupRecord) -> Dict[str, Any]:
    cols = record.columns()
    if isinstance(record, QuestionRecord):
        # derived fields are recomputed, never copied from the document
        gi = clamp_importance(record.global_importance)
        cols["global_importance"] = gi
        cols["years"] = dump_years(record.years)
        cols["repeat_count"], cols["importance_score"] = derive_metrics(record.years, gi)
    return cols


def _wipe(db: Session) -> None:
    for _key, _label, _record, model, _schema in reversed(_ENTITIES):
        db.execute(delete(model))
    db.commit()


def import_backup(db: Session, data: BackupData, mode: str = "merge") -> ImportResult:
    """
    Load a backup document's ``data`` section.

    ``merge`` updates rows whose id already exists and inserts the rest;
    ``replace`` empties the catalog first. Each record is validated and
    committed on its own; failures are collected in ``errors``.
    """
    if mode == "replace":
        _wipe(db)

    result = ImportResult()
    for key, label, record_cls, model, _schema in _ENTITIES:
        for raw in getattr(data, key):
            name = raw.get("name") or raw.get("title") or raw.get("label") or raw.get("id")
            try:
                record = record_cls.model_validate(raw)
                name = record.display()
                cols = _columns(record)

                existing = db.get(model, record.id) if mode == "merge" else None
                if existing is not None:
                    for attr, value in cols.items():
                        setattr(existing, attr, value)
                else:
                    stamps = {}
                    if record.created_at is not None:
                        stamps["created_at"] = record.created_at
                    if record.updated_at is not None:
                        stamps["updated_at"] = record.updated_at
                    db.add(model(id=record.id, **cols, **stamps))
                db.commit()
                setattr(result, key, getattr(result, key) + 1)
            except ValidationError as e:
                result.errors.append(f"{label}: {name} - invalid record ({e.error_count()} errors)")
            except Exception as e:
                db.rollback()
                result.errors.append(f"{label}: {name} - {e.__class__.__name__}: {e}")

    refresh_statistics(db)
    logger.info(
        "backup import (%s): %d subjects, %d systems, %d marks sections, %d questions, "
        "%d folders, %d files, %d errors",
        mode,
        result.subjects,
        result.systems,
        result.marks_sections,
        result.questions,
        result.folders,
        result.files,
        len(result.errors),
    )
    return result
