from __future__ import annotations

from typing import List

from fastapi import APIRouter

from catalog import get_config
from db import SessionLocal
from history import DrillProgress, ProgressSummary, drill_progress, progress_summary
from mastery import TopicGroupProgress, all_topic_progress, next_recommended_level
from routers.questions import best_ratings, level_out, require_level
from schemas.questions import LevelOut
from store import all_attempts, attempts_for_level, best_times

router = APIRouter(tags=["progress"])


@router.get("/mastery", response_model=List[TopicGroupProgress])
def mastery():
    config = get_config()
    with SessionLocal() as db:
        times = best_times(db)
    return all_topic_progress(config, best_ratings(config, times))


@router.get("/mastery/next", response_model=LevelOut)
def next_level():
    config = get_config()
    with SessionLocal() as db:
        times = best_times(db)
    level = next_recommended_level(
        config.levels, best_ratings(config, times), config.rating_tiers, config.mastery_tier
    )
    return level_out(level, config, times)


@router.get("/progress/summary", response_model=ProgressSummary)
def summary():
    with SessionLocal() as db:
        records = all_attempts(db)
    return progress_summary(records)


@router.get("/progress/{level_key}", response_model=DrillProgress)
def level_progress(level_key: str):
    require_level(get_config(), level_key)
    with SessionLocal() as db:
        records = attempts_for_level(db, level_key)
    return drill_progress(level_key, records)
