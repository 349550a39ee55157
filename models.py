from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )


class Subject(TimestampMixin, Base):
    __tablename__ = "subjects"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(32), default="#3b82f6")
    icon: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    systems: Mapped[List["System"]] = relationship(
        back_populates="subject", cascade="all, delete-orphan"
    )
    questions: Mapped[List["Question"]] = relationship(
        back_populates="subject", cascade="all, delete-orphan"
    )

    @property
    def system_count(self) -> int:
        return len(self.systems)

    @property
    def question_count(self) -> int:
        return len(self.questions)


class System(TimestampMixin, Base):
    __tablename__ = "systems"
    __table_args__ = (UniqueConstraint("subject_id", "name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    subject_id: Mapped[str] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), index=True
    )

    subject: Mapped[Subject] = relationship(back_populates="systems")
    marks_sections: Mapped[List["MarksSection"]] = relationship(
        back_populates="system",
        cascade="all, delete-orphan",
        order_by="MarksSection.marks.desc()",
    )
    questions: Mapped[List["Question"]] = relationship(
        back_populates="system", cascade="all, delete-orphan"
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def marks_section_count(self) -> int:
        return len(self.marks_sections)


class MarksSection(TimestampMixin, Base):
    __tablename__ = "marks_sections"
    __table_args__ = (UniqueConstraint("system_id", "marks"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    marks: Mapped[int] = mapped_column(Integer)
    label: Mapped[str] = mapped_column(String(100))
    system_id: Mapped[str] = mapped_column(
        ForeignKey("systems.id", ondelete="CASCADE"), index=True
    )

    system: Mapped[System] = relationship(back_populates="marks_sections")
    questions: Mapped[List["Question"]] = relationship(
        back_populates="marks_section",
        cascade="all, delete-orphan",
        order_by="[Question.importance_score.desc(), Question.repeat_count.desc()]",
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)


class Question(TimestampMixin, Base):
    __tablename__ = "questions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # JSON-encoded list of exam years; read back through scoring.parse_years
    years: Mapped[str] = mapped_column(Text, default="[]")
    repeat_count: Mapped[int] = mapped_column(Integer, default=0)
    importance_score: Mapped[float] = mapped_column(Float, default=0.0, index=True)
    global_importance: Mapped[float] = mapped_column(Float, default=0.5)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_bookmarked: Mapped[bool] = mapped_column(Boolean, default=False)

    # stored directly on the row; not re-derived from marks_section
    subject_id: Mapped[str] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), index=True
    )
    system_id: Mapped[str] = mapped_column(
        ForeignKey("systems.id", ondelete="CASCADE"), index=True
    )
    marks_section_id: Mapped[str] = mapped_column(
        ForeignKey("marks_sections.id", ondelete="CASCADE"), index=True
    )

    subject: Mapped[Subject] = relationship(back_populates="questions")
    system: Mapped[System] = relationship(back_populates="questions")
    marks_section: Mapped[MarksSection] = relationship(back_populates="questions")
    files: Mapped[List["File"]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="File.created_at.desc()",
    )
    folders: Mapped[List["Folder"]] = relationship(
        back_populates="question", cascade="all, delete-orphan", order_by="Folder.name"
    )

    @property
    def file_count(self) -> int:
        return len(self.files)


class Folder(TimestampMixin, Base):
    __tablename__ = "folders"
    __table_args__ = (UniqueConstraint("question_id", "name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200))
    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True
    )

    question: Mapped[Question] = relationship(back_populates="folders")
    # no delete cascade: removing a folder leaves its files folder-less
    files: Mapped[List["File"]] = relationship(
        back_populates="folder", order_by="File.created_at.desc()", passive_deletes=True
    )

    @property
    def file_count(self) -> int:
        return len(self.files)


class File(TimestampMixin, Base):
    __tablename__ = "files"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(16), default="other")
    url: Mapped[str] = mapped_column(Text)
    size: Mapped[int] = mapped_column(Integer, default=0)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True
    )
    folder_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"), nullable=True, index=True
    )

    question: Mapped[Question] = relationship(back_populates="files")
    folder: Mapped[Optional[Folder]] = relationship(back_populates="files")


# the statistics table holds exactly one row under this key
STATISTICS_ID = 1


class Statistics(Base):
    __tablename__ = "statistics"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    total_subjects: Mapped[int] = mapped_column(Integer, default=0)
    total_systems: Mapped[int] = mapped_column(Integer, default=0)
    total_questions: Mapped[int] = mapped_column(Integer, default=0)
    total_files: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )
