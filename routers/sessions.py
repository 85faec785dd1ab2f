from __future__ import annotations

import os
import random

from fastapi import APIRouter, HTTPException

from catalog import get_config
from db import SessionLocal
from parsing import parse_answer
from routers.attempts import record_completion
from routers.questions import level_out, question_out, require_level
from schemas.sessions import AnswerRequest, AnswerResponse, SessionOut, StartSessionRequest
from sessions import DEFAULT_TTL_SECONDS, DrillSession, SessionFinished, SessionRegistry
from store import best_times

router = APIRouter(prefix="/sessions", tags=["sessions"])

# abandoned sessions expire after this many idle seconds
SESSION_TTL_SECONDS = float(os.getenv("DRILLS_SESSION_TTL", DEFAULT_TTL_SECONDS))

registry = SessionRegistry(ttl_seconds=SESSION_TTL_SECONDS)

POSITIVE_FEEDBACK = [
    "Awesome!",
    "Great Job!",
    "You got it!",
    "Fantastic!",
    "Brilliant!",
    "Keep it up!",
]


def _session_out(s: DrillSession) -> SessionOut:
    config = get_config()
    with SessionLocal() as db:
        times = best_times(db)
    return SessionOut(
        id=s.id,
        level=level_out(s.level, config, times),
        required_streak=s.required_streak,
        streak=s.streak,
        question=question_out(s.question) if s.question and not s.finished else None,
    )


def _require_session(session_id: str) -> DrillSession:
    s = registry.get(session_id)
    if s is None:
        raise HTTPException(status_code=404, detail="session not found")
    return s


@router.post("", response_model=SessionOut)
def start_session(req: StartSessionRequest):
    config = get_config()
    level = require_level(config, req.level_key)
    s = registry.start(level, config.required_streak)
    return _session_out(s)


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str):
    return _session_out(_require_session(session_id))


@router.post("/{session_id}/answer", response_model=AnswerResponse)
def submit_answer(session_id: str, req: AnswerRequest):
    s = _require_session(session_id)
    user_answer = parse_answer(req.answer, s.level.family, fraction_answer=s.expects_fraction)
    try:
        outcome = s.answer(user_answer)
    except SessionFinished:
        raise HTTPException(status_code=409, detail="session already finished")

    if not outcome.correct:
        return AnswerResponse(
            ok=True,
            correct=False,
            streak=0,
            complete=False,
            expected=outcome.expected,
            question=question_out(s.question),
        )

    feedback = random.choice(POSITIVE_FEEDBACK)
    if not outcome.complete:
        return AnswerResponse(
            ok=True,
            correct=True,
            streak=outcome.streak,
            complete=False,
            feedback=feedback,
            question=question_out(s.question),
        )

    registry.discard(s.id)
    result = record_completion(get_config(), s.level, outcome.elapsed_seconds, s.required_streak)
    return AnswerResponse(
        ok=True,
        correct=True,
        streak=outcome.streak,
        complete=True,
        feedback=feedback,
        result=result,
    )


@router.delete("/{session_id}")
def quit_session(session_id: str):
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="session not found")
    return {"ok": True}
