# services/drills/schemas/questions.py
from typing import List, Optional

from pydantic import BaseModel

from generator import Family, Parts
from rating import RatingTier


class QuestionOut(BaseModel):
    """What the client renders. Never carries the answer."""

    template: str
    structured: bool
    answer_shape: str  # "scalar" | "fraction" | "fdp"
    parts: Optional[Parts] = None


class LevelOut(BaseModel):
    key: str
    name: str
    family: Family
    best_time: Optional[float] = None
    rating: Optional[RatingTier] = None


class LevelGroupOut(BaseModel):
    key: str
    name: str
    levels: List[LevelOut]
