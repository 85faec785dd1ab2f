from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

DEFAULT_MULTIPLIER_KEY = "default"


class RatingTier(BaseModel):
    """
    A named bracket of average seconds per question.
    max_avg is inclusive; None means unbounded (the catch-all last tier).
    """

    model_config = ConfigDict(frozen=True)
    key: str
    name: str
    max_avg: Optional[float] = None

    def accepts(self, average: float) -> bool:
        return self.max_avg is None or average <= self.max_avg


def validate_tiers(tiers: Sequence[RatingTier]) -> List[RatingTier]:
    """Bounds must increase strictly and only the last tier may be unbounded."""
    tiers = list(tiers)
    if not tiers:
        raise ValueError("rating tiers must not be empty")
    if tiers[-1].max_avg is not None:
        raise ValueError("last rating tier must be unbounded (max_avg = null)")
    bounds = [t.max_avg for t in tiers[:-1]]
    if any(b is None for b in bounds):
        raise ValueError("only the last rating tier may be unbounded")
    for lower, upper in zip(bounds, bounds[1:]):
        if upper <= lower:
            raise ValueError(f"rating tier bounds must increase: {lower} then {upper}")
    keys = [t.key for t in tiers]
    if len(set(keys)) != len(keys):
        raise ValueError("rating tier keys must be unique")
    return tiers


def difficulty_multiplier(level_key: str, multipliers: Mapping[str, float]) -> float:
    if level_key in multipliers:
        return multipliers[level_key]
    return multipliers.get(DEFAULT_MULTIPLIER_KEY, 1.0)


def adjusted_average(
    elapsed_seconds: float,
    level_key: str,
    required_streak: int,
    multipliers: Mapping[str, float],
) -> float:
    if required_streak <= 0:
        raise ValueError("required_streak must be positive")
    if elapsed_seconds < 0:
        raise ValueError("elapsed_seconds must not be negative")
    return (elapsed_seconds / required_streak) / difficulty_multiplier(level_key, multipliers)


def rate(
    elapsed_seconds: float,
    level_key: str,
    required_streak: int,
    multipliers: Mapping[str, float],
    tiers: Sequence[RatingTier],
) -> RatingTier:
    average = adjusted_average(elapsed_seconds, level_key, required_streak, multipliers)
    for tier in tiers:
        if tier.accepts(average):
            return tier
    # unreachable for a validated tier list
    return tiers[-1]
