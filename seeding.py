"""
Populate the catalog from the bundled seed data.

Both steps are idempotent: subjects are matched by name, systems by
(subject, name), marks sections by (system, marks) and questions by
(title, marks section). Every record is committed on its own, so one bad
record ends up in ``errors`` without aborting the rest.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog import SeedCatalog
from models import MarksSection, Question, Subject, System
from scoring import clamp_importance, derive_metrics, dump_years
from stats import refresh_statistics

logger = logging.getLogger(__name__)


def seed_structure(db: Session) -> Dict[str, Any]:
    results: Dict[str, Any] = {"subjects": 0, "systems": 0, "marksSections": 0, "errors": []}
    errors: List[str] = results["errors"]
    marks_options = SeedCatalog.marks_options()

    for info in SeedCatalog.subjects():
        try:
            subject = db.scalars(select(Subject).where(Subject.name == info.name)).first()
            if subject is None:
                subject = Subject(
                    name=info.name,
                    description=info.description,
                    color=info.color,
                    icon=info.icon,
                )
                db.add(subject)
                db.commit()
                results["subjects"] += 1
        except Exception as e:
            db.rollback()
            errors.append(f"Subject {info.name}: {e}")
            continue

        for sys_info in info.systems:
            try:
                system = db.scalars(
                    select(System).where(System.subject_id == subject.id, System.name == sys_info.name)
                ).first()
                if system is None:
                    system = System(
                        name=sys_info.name,
                        description=sys_info.description,
                        order=sys_info.order,
                        subject_id=subject.id,
                    )
                    db.add(system)
                    db.commit()
                    results["systems"] += 1
            except Exception as e:
                db.rollback()
                errors.append(f"System {sys_info.name}: {e}")
                continue

            for marks in marks_options:
                try:
                    exists = db.scalars(
                        select(MarksSection).where(
                            MarksSection.system_id == system.id, MarksSection.marks == marks
                        )
                    ).first()
                    if exists is None:
                        db.add(MarksSection(marks=marks, label=f"{marks} Markers", system_id=system.id))
                        db.commit()
                        results["marksSections"] += 1
                except Exception as e:
                    db.rollback()
                    errors.append(f"Marks section {marks} for {sys_info.name}: {e}")

    refresh_statistics(db)
    logger.info(
        "seeded structure: %d subjects, %d systems, %d marks sections, %d errors",
        results["subjects"],
        results["systems"],
        results["marksSections"],
        len(errors),
    )
    return results


def seed_questions(db: Session) -> Dict[str, Any]:
    results: Dict[str, Any] = {"questionsAdded": 0, "skipped": 0, "errors": []}
    errors: List[str] = results["errors"]

    # (subject name, system name, marks) -> (subject id, system id, section id)
    targets = {}
    rows = db.execute(
        select(Subject.name, System.name, MarksSection.marks, Subject.id, System.id, MarksSection.id)
        .join(System, System.subject_id == Subject.id)
        .join(MarksSection, MarksSection.system_id == System.id)
    ).all()
    for subj_name, sys_name, marks, subj_id, sys_id, sec_id in rows:
        targets[(subj_name, sys_name, marks)] = (subj_id, sys_id, sec_id)

    for q in SeedCatalog.questions():
        target = targets.get((q.subject, q.system, q.marks))
        if target is None:
            # structure not seeded for this question
            results["skipped"] += 1
            continue
        subject_id, system_id, section_id = target

        try:
            exists = db.scalars(
                select(Question).where(
                    Question.title == q.title, Question.marks_section_id == section_id
                )
            ).first()
            if exists is not None:
                continue

            global_importance = clamp_importance(q.global_importance)
            repeat_count, score = derive_metrics(q.years, global_importance)
            db.add(
                Question(
                    title=q.title,
                    description=q.description,
                    years=dump_years(q.years),
                    repeat_count=repeat_count,
                    importance_score=score,
                    global_importance=global_importance,
                    subject_id=subject_id,
                    system_id=system_id,
                    marks_section_id=section_id,
                )
            )
            db.commit()
            results["questionsAdded"] += 1
        except Exception as e:
            db.rollback()
            errors.append(f"Question: {q.title} - {e}")

    refresh_statistics(db)
    logger.info(
        "seeded %d questions (%d skipped, %d errors)",
        results["questionsAdded"],
        results["skipped"],
        len(errors),
    )
    return results


def structure_status(db: Session) -> Dict[str, Any]:
    subjects = db.scalar(select(func.count()).select_from(Subject)) or 0
    systems = db.scalar(select(func.count()).select_from(System)) or 0
    sections = db.scalar(select(func.count()).select_from(MarksSection)) or 0
    return {
        "isSeeded": subjects > 0,
        "counts": {"subjects": subjects, "systems": systems, "marksSections": sections},
    }


def questions_status(db: Session) -> Dict[str, Any]:
    n = db.scalar(select(func.count()).select_from(Question)) or 0
    return {"hasQuestions": n > 0, "questionsCount": n}
