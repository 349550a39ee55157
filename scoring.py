"""
Importance scoring for catalog questions.

A question's score blends how often it has been asked, how recently, and a
manually assigned weight:

    score = 0.4 * repeat + 0.4 * recency + 0.2 * global

where ``repeat`` saturates at 10 appearances, ``recency`` saturates at 5
appearances within the last 5 calendar years, and ``global`` is the
user-assigned importance clamped to [0, 1]. The result is rounded half-up to
two decimals so that stored scores are stable across platforms.
"""

from __future__ import annotations

import json
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Optional

REPEAT_WEIGHT = 0.4
RECENCY_WEIGHT = 0.4
GLOBAL_WEIGHT = 0.2

REPEAT_SATURATION = 10
RECENCY_WINDOW_YEARS = 5
RECENCY_SATURATION = 5

DEFAULT_GLOBAL_IMPORTANCE = 0.5


def clamp_importance(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def _year_number(year: Any) -> Optional[int]:
    # whole integers only: "2019-20" is skipped, not read as 2019
    try:
        return int(str(year).strip())
    except (TypeError, ValueError):
        return None


def recent_year_count(years: Iterable[Any], current_year: int) -> int:
    """Number of entries whose year lies within the recency window (non-numeric entries are skipped)."""
    count = 0
    for y in years:
        n = _year_number(y)
        if n is not None and current_year - n <= RECENCY_WINDOW_YEARS:
            count += 1
    return count


def _round2(value: float) -> float:
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_score(
    repeat_count: int,
    years: Iterable[Any],
    global_importance: float,
    current_year: Optional[int] = None,
) -> float:
    if current_year is None:
        current_year = date.today().year

    recency = min(recent_year_count(years, current_year) / RECENCY_SATURATION, 1.0)
    repeat = min(max(repeat_count, 0) / REPEAT_SATURATION, 1.0)
    glob = clamp_importance(global_importance)

    score = REPEAT_WEIGHT * repeat + RECENCY_WEIGHT * recency + GLOBAL_WEIGHT * glob
    return _round2(score)


def derive_metrics(
    years: List[str], global_importance: float, current_year: Optional[int] = None
) -> tuple[int, float]:
    """Return ``(repeat_count, importance_score)``; the repeat count is always ``len(years)``."""
    repeat_count = len(years)
    return repeat_count, compute_score(repeat_count, years, global_importance, current_year)


def parse_years(raw: Any) -> List[str]:
    # stored rows may hold anything; a broken value reads as "no years"
    if raw is None:
        return []
    if isinstance(raw, list):
        return [str(y) for y in raw]
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(data, list):
        return []
    return [str(y) for y in data]


def dump_years(years: Iterable[Any]) -> str:
    return json.dumps([str(y) for y in years])
