# schemas/backup.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from schemas.base import CamelModel
from scoring import DEFAULT_GLOBAL_IMPORTANCE, parse_years

# ---------- Records as they appear in a backup document ----------


class BackupRecord(CamelModel):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def columns(self) -> Dict[str, Any]:
        """Column values to write, without id and timestamps."""
        return self.model_dump(exclude={"id", "created_at", "updated_at"})

    def display(self) -> str:
        return self.id


class SubjectRecord(BackupRecord):
    name: str
    description: Optional[str] = None
    color: str = "#3b82f6"
    icon: Optional[str] = None

    def display(self) -> str:
        return self.name


class SystemRecord(BackupRecord):
    name: str
    description: Optional[str] = None
    order: int = 0
    subject_id: str

    def display(self) -> str:
        return self.name


class MarksSectionRecord(BackupRecord):
    marks: int
    label: Optional[str] = None
    system_id: str

    @field_validator("label")
    @classmethod
    def _label(cls, v):
        return v or None

    def columns(self) -> Dict[str, Any]:
        cols = super().columns()
        cols["label"] = self.label or f"{self.marks} Markers"
        return cols

    def display(self) -> str:
        return self.label or f"{self.marks} Markers"


class QuestionRecord(BackupRecord):
    title: str
    description: Optional[str] = None
    # a list in exported documents; older dumps carry the serialized string
    years: List[str] = Field(default_factory=list)
    global_importance: float = DEFAULT_GLOBAL_IMPORTANCE
    notes: Optional[str] = None
    is_bookmarked: bool = False
    subject_id: str
    system_id: str
    marks_section_id: str

    @field_validator("years", mode="before")
    @classmethod
    def _years(cls, v):
        return parse_years(v)

    def display(self) -> str:
        return self.title


class FolderRecord(BackupRecord):
    name: str
    question_id: str

    def display(self) -> str:
        return self.name


class FileRecord(BackupRecord):
    name: str
    type: str = "other"
    url: str
    size: int = 0
    description: Optional[str] = None
    question_id: str
    folder_id: Optional[str] = None

    def display(self) -> str:
        return self.name


# ---------- Import request / result ----------


class BackupData(CamelModel):
    # raw dicts so each record is validated (and can fail) on its own
    subjects: List[Dict[str, Any]] = Field(default_factory=list)
    systems: List[Dict[str, Any]] = Field(default_factory=list)
    marks_sections: List[Dict[str, Any]] = Field(default_factory=list)
    questions: List[Dict[str, Any]] = Field(default_factory=list)
    folders: List[Dict[str, Any]] = Field(default_factory=list)
    files: List[Dict[str, Any]] = Field(default_factory=list)


class BackupImportRequest(CamelModel):
    data: Optional[BackupData] = None
    mode: Literal["merge", "replace"] = "merge"


class ImportResult(CamelModel):
    subjects: int = 0
    systems: int = 0
    marks_sections: int = 0
    questions: int = 0
    folders: int = 0
    files: int = 0
    errors: List[str] = Field(default_factory=list)
