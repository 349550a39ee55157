from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import settings
from models import STATISTICS_ID, File, MarksSection, Question, Statistics, Subject, System


def _count(db: Session, model) -> int:
    return db.scalar(select(func.count()).select_from(model)) or 0


def refresh_statistics(db: Session) -> Statistics:
    """
    Recount subjects, systems, questions and files into the singleton row.

    Always a full recount, never an increment, so concurrent callers converge
    on the same values. Creates the row on first use and commits.
    """
    counts = {
        "total_subjects": _count(db, Subject),
        "total_systems": _count(db, System),
        "total_questions": _count(db, Question),
        "total_files": _count(db, File),
    }

    stats = db.get(Statistics, STATISTICS_ID)
    if stats is None:
        db.add(Statistics(id=STATISTICS_ID, **counts))
        try:
            db.commit()
        except IntegrityError:
            # a concurrent refresh created the row first; overwrite it instead
            db.rollback()
            stats = db.get(Statistics, STATISTICS_ID)
        else:
            return db.get(Statistics, STATISTICS_ID)

    for key, value in counts.items():
        setattr(stats, key, value)
    # unchanged counts would otherwise skip the onupdate timestamp
    stats.updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(stats)
    return stats


def marks_distribution(db: Session) -> List[Dict[str, Any]]:
    """Question totals per distinct marks value, across all systems."""
    rows = db.execute(
        select(MarksSection.marks, func.count(Question.id))
        .join(Question, Question.marks_section_id == MarksSection.id)
        .group_by(MarksSection.marks)
        .order_by(MarksSection.marks.desc())
    ).all()
    return [{"marks": m, "label": f"{m} Markers", "count": n} for m, n in rows]


def subject_breakdown(db: Session) -> List[Dict[str, Any]]:
    system_counts = dict(
        db.execute(select(System.subject_id, func.count(System.id)).group_by(System.subject_id)).all()
    )
    question_counts = dict(
        db.execute(
            select(Question.subject_id, func.count(Question.id)).group_by(Question.subject_id)
        ).all()
    )
    subjects = db.scalars(select(Subject).order_by(Subject.created_at)).all()
    return [
        {
            "id": s.id,
            "name": s.name,
            "color": s.color,
            "systemCount": system_counts.get(s.id, 0),
            "questionCount": question_counts.get(s.id, 0),
        }
        for s in subjects
    ]


def dashboard_summary(db: Session) -> Dict[str, Any]:
    stats = refresh_statistics(db)
    since = datetime.now(UTC) - timedelta(days=settings.RECENT_QUESTION_DAYS)

    bookmarked = db.scalar(
        select(func.count()).select_from(Question).where(Question.is_bookmarked.is_(True))
    )
    total_repeat = db.scalar(select(func.coalesce(func.sum(Question.repeat_count), 0)))
    with_files = db.scalar(select(func.count(func.distinct(File.question_id))))
    recent = db.scalar(
        select(func.count()).select_from(Question).where(Question.created_at >= since)
    )

    return {
        "totalSubjects": stats.total_subjects,
        "totalSystems": stats.total_systems,
        "totalQuestions": stats.total_questions,
        "totalFiles": stats.total_files,
        "updatedAt": stats.updated_at,
        "bookmarkedQuestions": bookmarked or 0,
        "totalRepeatCount": total_repeat or 0,
        "questionsWithFiles": with_files or 0,
        "recentQuestions": recent or 0,
        "subjectBreakdown": subject_breakdown(db),
        "marksBreakdown": marks_distribution(db),
    }
