# schemas/questions.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from schemas.attachments import FileBrief, FileWithFolder, FolderSummary
from schemas.base import CamelModel
from schemas.catalog import (
    MarksSectionBrief,
    MarksSectionOut,
    SubjectBrief,
    SubjectOut,
    SystemBrief,
    SystemOut,
    SystemWithSubject,
)
from scoring import DEFAULT_GLOBAL_IMPORTANCE, parse_years


class QuestionOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    years: List[str] = []
    repeat_count: int
    importance_score: float
    global_importance: float
    notes: Optional[str] = None
    is_bookmarked: bool = False
    subject_id: str
    system_id: str
    marks_section_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("years", mode="before")
    @classmethod
    def _parse_years(cls, v):
        return parse_years(v)


class QuestionListItem(QuestionOut):
    subject: SubjectBrief
    system: SystemBrief
    marks_section: MarksSectionBrief
    file_count: int = 0


class QuestionDetail(QuestionOut):
    subject: SubjectOut
    system: SystemOut
    marks_section: MarksSectionOut
    files: List[FileWithFolder] = []
    folders: List[FolderSummary] = []


class QuestionWithFiles(QuestionOut):
    files: List[FileBrief] = []
    file_count: int = 0


class MarksSectionDetail(MarksSectionOut):
    system: SystemWithSubject
    questions: List[QuestionWithFiles] = []
    question_count: int = 0


# ---------- Requests ----------


def _year_strings(v) -> List[str]:
    # a bare string would otherwise be split into characters
    if not isinstance(v, (list, tuple)):
        raise ValueError("years must be a list")
    return [str(y).strip() for y in v]


class QuestionCreate(CamelModel):
    title: str
    subject_id: str
    system_id: str
    marks_section_id: str
    description: Optional[str] = None
    years: List[str] = Field(default_factory=list)
    global_importance: float = DEFAULT_GLOBAL_IMPORTANCE
    notes: Optional[str] = None
    is_bookmarked: bool = False
    # Client may send these, but the server always derives its own.
    repeat_count: Optional[int] = None
    importance_score: Optional[float] = None

    @field_validator("years", mode="before")
    @classmethod
    def _stringify_years(cls, v):
        if v is None:
            return []
        return _year_strings(v)


class QuestionUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    years: Optional[List[str]] = None
    global_importance: Optional[float] = None
    notes: Optional[str] = None
    is_bookmarked: Optional[bool] = None
    subject_id: Optional[str] = None
    system_id: Optional[str] = None
    marks_section_id: Optional[str] = None
    repeat_count: Optional[int] = None
    importance_score: Optional[float] = None

    @field_validator("years", mode="before")
    @classmethod
    def _stringify_years(cls, v):
        if v is None:
            return None
        return _year_strings(v)
