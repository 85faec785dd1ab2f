from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mastery import TopicGroupProgress
from rating import RatingTier


class AttemptIn(BaseModel):
    level_key: str
    elapsed_seconds: float = Field(ge=0)
    # defaults to the configured required streak
    streak_length: Optional[int] = Field(default=None, ge=1)


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    level_key: str
    elapsed_seconds: float
    streak_length: int
    rating_key: str | None = None


class CompletionOut(BaseModel):
    level_key: str
    level_name: str
    elapsed_seconds: float
    rating: RatingTier
    is_new_best: bool
    previous_best: Optional[float] = None
    attempt_id: Optional[int] = None
    topic: Optional[TopicGroupProgress] = None
