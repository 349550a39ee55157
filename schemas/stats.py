# schemas/stats.py
from datetime import datetime
from typing import Optional

from schemas.base import CamelModel


class StatisticsOut(CamelModel):
    id: int
    total_subjects: int
    total_systems: int
    total_questions: int
    total_files: int
    updated_at: Optional[datetime] = None
