# schemas/catalog.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from schemas.base import CamelModel
from scoring import parse_years

# ---------- Subjects ----------


class SubjectBrief(CamelModel):
    id: str
    name: str
    color: Optional[str] = None


class SubjectOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubjectCreate(CamelModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class SubjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


# ---------- Systems ----------


class SystemBrief(CamelModel):
    id: str
    name: str


class SystemOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    order: int
    subject_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SystemCreate(CamelModel):
    name: str
    subject_id: str
    description: Optional[str] = None
    # server assigns max+1 within the subject when omitted
    order: Optional[int] = None


class SystemUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    subject_id: Optional[str] = None


# ---------- Marks sections ----------


class MarksSectionBrief(CamelModel):
    id: str
    marks: int
    label: str


class MarksSectionOut(CamelModel):
    id: str
    marks: int
    label: str
    system_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MarksSectionCreate(CamelModel):
    marks: int
    system_id: str
    label: Optional[str] = None


class MarksSectionUpdate(CamelModel):
    marks: Optional[int] = None
    label: Optional[str] = None
    system_id: Optional[str] = None


# ---------- Composite views ----------


class MarksSectionSummary(MarksSectionBrief):
    question_count: int = 0


class SystemWithSubject(SystemBrief):
    subject: SubjectBrief


class SystemListItem(SystemOut):
    subject: SubjectBrief
    question_count: int = 0
    marks_section_count: int = 0
    marks_sections: List[MarksSectionSummary] = []


class SystemDetail(SystemOut):
    subject: SubjectOut
    question_count: int = 0
    marks_section_count: int = 0
    marks_sections: List[MarksSectionSummary] = []


class MarksSectionListItem(MarksSectionOut):
    system: SystemWithSubject
    question_count: int = 0


class QuestionBrief(CamelModel):
    id: str
    title: str
    importance_score: float
    repeat_count: int
    years: List[str] = []

    @field_validator("years", mode="before")
    @classmethod
    def _parse_years(cls, v):
        return parse_years(v)


class SubjectListItem(SubjectOut):
    system_count: int = 0
    question_count: int = 0
    systems: List[SystemBrief] = []
    featured_questions: List[QuestionBrief] = []
