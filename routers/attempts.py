# services/drills/routers/attempts.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from catalog import DrillConfig, LevelDefinition, get_config
from db import SessionLocal
from deps.auth import require_client
from mastery import topic_progress
from models import Attempt
from routers.questions import best_ratings, require_level
from schemas.attempts import AttemptIn, AttemptOut, CompletionOut
from store import best_times, get_best_time, recent_attempts, record_attempt, set_best_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attempts", tags=["attempts"])


def record_completion(
    config: DrillConfig,
    level: LevelDefinition,
    elapsed_seconds: float,
    streak_length: Optional[int] = None,
) -> CompletionOut:
    """
    Rate a finished run, then store the attempt and any new best time.
    Storage failures are logged and reported as attempt_id=None; the
    rating is still returned.
    """
    streak_length = streak_length or config.required_streak
    rating = config.rate(elapsed_seconds, level.key)

    previous_best: Optional[float] = None
    is_new_best = False
    attempt_id: Optional[int] = None
    topic = None
    try:
        with SessionLocal() as db:
            previous_best = get_best_time(db, level.key)
            is_new_best = previous_best is None or elapsed_seconds < previous_best
            if is_new_best:
                set_best_time(db, level.key, elapsed_seconds)
            attempt = record_attempt(db, level.key, elapsed_seconds, streak_length, rating.key)
            attempt_id = attempt.id
            times = best_times(db)
        group = config.group_of(level.key)
        if group is not None:
            topic = topic_progress(
                group, best_ratings(config, times), config.rating_tiers, config.mastery_tier
            )
    except SQLAlchemyError:
        logger.exception("could not record attempt for %s", level.key)

    logger.info(
        "completed %s in %ss: %s%s", level.key, elapsed_seconds, rating.key, " (new best)" if is_new_best else ""
    )
    return CompletionOut(
        level_key=level.key,
        level_name=level.name,
        elapsed_seconds=elapsed_seconds,
        rating=rating,
        is_new_best=is_new_best,
        previous_best=previous_best,
        attempt_id=attempt_id,
        topic=topic,
    )


@router.post("", response_model=CompletionOut)
def create_attempt(req: AttemptIn):
    config = get_config()
    level = require_level(config, req.level_key)
    return record_completion(config, level, req.elapsed_seconds, req.streak_length)


@router.get("/recent-list", dependencies=[Depends(require_client)])
def attempts_recent(limit: int = 20):
    limit = max(1, min(limit, 100))

    with SessionLocal() as db:
        items = recent_attempts(db, limit)
        rows = [AttemptOut.model_validate(a).model_dump() for a in items]
    return {"ok": True, "items": rows, "count": len(rows)}


@router.get("/{attempt_id}", response_model=AttemptOut)
def get_attempt(attempt_id: int):
    with SessionLocal() as db:
        a = db.get(Attempt, attempt_id)
        if not a:
            raise HTTPException(status_code=404, detail="Attempt not found")
        return AttemptOut.model_validate(a)
