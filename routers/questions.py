from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, HTTPException

from catalog import DrillConfig, LevelDefinition, get_config
from db import SessionLocal
from generator import FDPAnswer, FractionAnswer, Question
from rating import RatingTier
from schemas.questions import LevelGroupOut, LevelOut, QuestionOut
from store import best_times

router = APIRouter(tags=["levels"])


def question_out(q: Question) -> QuestionOut:
    if isinstance(q.answer, FDPAnswer):
        shape = "fdp"
    elif isinstance(q.answer, FractionAnswer):
        shape = "fraction"
    else:
        shape = "scalar"
    return QuestionOut(template=q.template, structured=q.is_structured, answer_shape=shape, parts=q.parts)


def best_ratings(config: DrillConfig, times: Dict[str, float]) -> Dict[str, RatingTier]:
    return {key: config.rate(t, key) for key, t in times.items() if config.get_level(key)}


def level_out(level: LevelDefinition, config: DrillConfig, times: Dict[str, float]) -> LevelOut:
    best = times.get(level.key)
    return LevelOut(
        key=level.key,
        name=level.name,
        family=level.family,
        best_time=best,
        rating=config.rate(best, level.key) if best is not None else None,
    )


def require_level(config: DrillConfig, key: str) -> LevelDefinition:
    level = config.get_level(key)
    if level is None:
        raise HTTPException(status_code=404, detail="level not found")
    return level


@router.get("/levels", response_model=List[LevelGroupOut])
def list_levels():
    config = get_config()
    with SessionLocal() as db:
        times = best_times(db)
    return [
        LevelGroupOut(
            key=g.key,
            name=g.name,
            levels=[level_out(lvl, config, times) for lvl in g.levels],
        )
        for g in config.level_groups
    ]


@router.get("/levels/{key}", response_model=LevelOut)
def get_level(key: str):
    config = get_config()
    level = require_level(config, key)
    with SessionLocal() as db:
        times = best_times(db)
    return level_out(level, config, times)


@router.get("/levels/{key}/sample", response_model=QuestionOut)
def sample_question(key: str):
    # preview only: the answer stays on the server
    level = require_level(get_config(), key)
    return question_out(level.generate())
