"""
Drill history derived from attempt records.

Nothing here is stored: best times, averages and improvement streaks are
recomputed from the append-only attempt log whenever they are asked for.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

MAX_ATTEMPTS_PER_DRILL = 500


class AttemptRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)
    level_key: str
    elapsed_seconds: float
    streak_length: int
    timestamp: datetime


class AttemptPoint(BaseModel):
    elapsed_seconds: float
    timestamp: datetime
    is_best: bool


class Improvement(BaseModel):
    previous_best: float
    new_best: float
    improvement: float
    percent_improvement: float
    timestamp: datetime


class DrillProgress(BaseModel):
    level_key: str
    attempts: List[AttemptPoint] = []
    best_time: Optional[float] = None
    best_time_date: Optional[datetime] = None
    total_attempts: int = 0
    average_time: float = 0.0
    last_attempt: Optional[datetime] = None
    improvements: List[Improvement] = []


class ProgressSummary(BaseModel):
    total_drills: int = 0
    total_attempts: int = 0
    total_time_spent: float = 0.0
    drills_with_improvement: int = 0
    average_improvement: float = 0.0


def drill_progress(level_key: str, records: Iterable[AttemptRecord]) -> DrillProgress:
    """Replay one level's attempts in time order."""
    ordered = sorted((r for r in records if r.level_key == level_key), key=lambda r: r.timestamp)
    out = DrillProgress(level_key=level_key)

    best: Optional[float] = None
    for r in ordered:
        t = r.elapsed_seconds
        if best is None or t < best:
            if best is not None:
                out.improvements.append(
                    Improvement(
                        previous_best=best,
                        new_best=t,
                        improvement=best - t,
                        percent_improvement=round((best - t) / best * 100, 1) if best else 0.0,
                        timestamp=r.timestamp,
                    )
                )
            best = t
            out.best_time_date = r.timestamp
        out.attempts.append(AttemptPoint(elapsed_seconds=t, timestamp=r.timestamp, is_best=t == best))

    out.attempts = out.attempts[-MAX_ATTEMPTS_PER_DRILL:]
    out.best_time = best
    out.total_attempts = len(out.attempts)
    if out.attempts:
        out.average_time = sum(a.elapsed_seconds for a in out.attempts) / len(out.attempts)
        out.last_attempt = out.attempts[-1].timestamp
    return out


def all_drill_progress(records: Iterable[AttemptRecord]) -> Dict[str, DrillProgress]:
    records = list(records)
    keys = sorted({r.level_key for r in records})
    return {k: drill_progress(k, records) for k in keys}


def progress_summary(records: Iterable[AttemptRecord]) -> ProgressSummary:
    drills = all_drill_progress(records)
    summary = ProgressSummary(total_drills=len(drills))
    all_improvements: List[float] = []
    for drill in drills.values():
        summary.total_attempts += drill.total_attempts
        summary.total_time_spent += sum(a.elapsed_seconds for a in drill.attempts)
        if drill.improvements:
            summary.drills_with_improvement += 1
        all_improvements.extend(i.percent_improvement for i in drill.improvements)
    if all_improvements:
        summary.average_improvement = round(sum(all_improvements) / len(all_improvements), 1)
    return summary
