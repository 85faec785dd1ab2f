from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from history import AttemptRecord
from models import Attempt, BestTime


def get_best_time(db: Session, level_key: str) -> Optional[float]:
    row = db.get(BestTime, level_key)
    return row.seconds if row else None


def set_best_time(db: Session, level_key: str, seconds: float) -> None:
    row = db.get(BestTime, level_key)
    if row is None:
        db.add(BestTime(level_key=level_key, seconds=seconds))
    else:
        row.seconds = seconds
    db.commit()


def best_times(db: Session) -> Dict[str, float]:
    return {row.level_key: row.seconds for row in db.scalars(select(BestTime))}


def record_attempt(
    db: Session,
    level_key: str,
    elapsed_seconds: float,
    streak_length: int,
    rating_key: Optional[str] = None,
) -> Attempt:
    attempt = Attempt(
        level_key=level_key,
        elapsed_seconds=elapsed_seconds,
        streak_length=streak_length,
        rating_key=rating_key,
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


def recent_attempts(db: Session, limit: int = 20) -> List[Attempt]:
    stmt = select(Attempt).order_by(Attempt.created_at.desc(), Attempt.id.desc()).limit(limit)
    return list(db.scalars(stmt))


def _records(rows) -> List[AttemptRecord]:
    return [
        AttemptRecord(
            level_key=a.level_key,
            elapsed_seconds=a.elapsed_seconds,
            streak_length=a.streak_length,
            timestamp=a.created_at,
        )
        for a in rows
    ]


def attempts_for_level(db: Session, level_key: str) -> List[AttemptRecord]:
    stmt = select(Attempt).where(Attempt.level_key == level_key).order_by(Attempt.id)
    return _records(db.scalars(stmt))


def all_attempts(db: Session) -> List[AttemptRecord]:
    return _records(db.scalars(select(Attempt).order_by(Attempt.id)))


def reset_progress(db: Session) -> int:
    n = db.execute(delete(Attempt)).rowcount or 0
    db.execute(delete(BestTime))
    db.commit()
    return n
