from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import Field, ValidationError

import settings
from schemas.base import CamelModel
from scoring import DEFAULT_GLOBAL_IMPORTANCE

STANDARD_MARKS = [10, 8, 5, 4, 3, 2, 1]


class SystemSeed(CamelModel):
    name: str
    description: Optional[str] = None
    order: int = 0


class SubjectSeed(CamelModel):
    name: str
    description: Optional[str] = None
    color: str = "#3b82f6"
    icon: Optional[str] = None
    systems: List[SystemSeed] = Field(default_factory=list)


class QuestionSeed(CamelModel):
    subject: str
    system: str
    marks: int
    title: str
    description: Optional[str] = None
    years: List[str] = Field(default_factory=list)
    global_importance: float = DEFAULT_GLOBAL_IMPORTANCE


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                # Skip malformed rows instead of failing the whole seed
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            # Treat a broken JSON file as empty
            data = []
    if isinstance(data, list):
        for obj in data:
            yield obj


class SeedCatalog:
    """
    The bundled starter catalog: subjects with their systems, the standard
    marks values every system gets, and sample questions sharded per subject
    under ``questions/``.
    """

    _subjects: List[SubjectSeed] = []
    _marks: List[int] = []
    _questions: List[QuestionSeed] = []
    _loaded_from: Optional[Path] = None

    @classmethod
    def ensure_loaded(cls) -> None:
        if cls._loaded_from is None:
            cls.reload()

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> int:
        base = Path(base_dir) if base_dir is not None else settings.CATALOG_DIR

        subjects: List[SubjectSeed] = []
        marks: List[int] = list(STANDARD_MARKS)
        structure = base / "structure.json"
        if structure.exists():
            with structure.open("r", encoding="utf-8") as f:
                try:
                    raw = json.load(f)
                except json.JSONDecodeError:
                    raw = {}
            if isinstance(raw, dict):
                marks = [int(m) for m in raw.get("marksOptions") or STANDARD_MARKS]
                for item in raw.get("subjects") or []:
                    try:
                        subjects.append(SubjectSeed.model_validate(item))
                    except ValidationError:
                        continue

        questions: List[QuestionSeed] = []
        qdir = base / "questions"
        if qdir.exists():
            for p in sorted(qdir.rglob("*")):
                if not p.is_file():
                    continue
                suf = p.suffix.lower()
                if suf == ".jsonl":
                    source = _iter_jsonl(p)
                elif suf == ".json":
                    source = _iter_json(p)
                else:
                    continue

                for raw in source:
                    try:
                        questions.append(QuestionSeed.model_validate(raw))
                    except ValidationError:
                        # Skip invalid records
                        continue

        cls._subjects = subjects
        cls._marks = marks
        cls._questions = questions
        cls._loaded_from = base
        return len(questions)

    @classmethod
    def subjects(cls) -> List[SubjectSeed]:
        cls.ensure_loaded()
        return cls._subjects

    @classmethod
    def marks_options(cls) -> List[int]:
        cls.ensure_loaded()
        return cls._marks

    @classmethod
    def questions(cls) -> List[QuestionSeed]:
        cls.ensure_loaded()
        return cls._questions


# Public API
def reload_catalog(base_dir: Optional[Path] = None) -> int:
    return SeedCatalog.reload(base_dir)
