# services/drills/schemas/sessions.py
from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, StrictBool, StrictFloat, StrictInt, StrictStr

from schemas.attempts import CompletionOut
from schemas.questions import LevelOut, QuestionOut

# ---------- Sessions ----------


class StartSessionRequest(BaseModel):
    level_key: str


class SessionOut(BaseModel):
    id: str
    level: LevelOut
    required_streak: int
    streak: int
    question: Optional[QuestionOut] = None


# ---------- Answers ----------


class AnswerRequest(BaseModel):
    # number/text for scalar questions, {"num", "den"} for fractions,
    # {"fraction", "decimal", "percentage"} for FDP conversions
    # strict so JSON true stays a bool and is marked wrong instead of becoming 1
    answer: Union[StrictBool, StrictInt, StrictFloat, StrictStr, Dict[str, Any], None] = None


class AnswerResponse(BaseModel):
    ok: bool
    correct: bool
    streak: int
    complete: bool
    # LaTeX of the canonical answer, only after a wrong attempt
    expected: Optional[str] = None
    feedback: str = ""
    question: Optional[QuestionOut] = None
    result: Optional[CompletionOut] = None
