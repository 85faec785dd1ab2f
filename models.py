from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Attempt(Base):
    """One completed drill run. Append-only."""

    __tablename__ = "attempts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    level_key: Mapped[str] = mapped_column(String(64), index=True)
    elapsed_seconds: Mapped[float] = mapped_column(Float)
    streak_length: Mapped[int] = mapped_column(Integer)
    # tier key at the time of the run; tiers are configurable so keep what was shown
    rating_key: Mapped[str | None] = mapped_column(String(32), nullable=True)


class BestTime(Base):
    __tablename__ = "best_times"
    level_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    seconds: Mapped[float] = mapped_column(sa.Float)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
