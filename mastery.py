from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from rating import RatingTier

if TYPE_CHECKING:
    from catalog import DrillConfig, LevelDefinition, LevelGroup


class TopicGroupProgress(BaseModel):
    key: str
    name: str
    mastered_count: int
    total_count: int
    progress: float
    percentage: int
    mastered_levels: List[str] = []


def is_mastered(tier: Optional[RatingTier], tiers: Sequence[RatingTier], mastery_key: str) -> bool:
    """Tiers run best-first, so 'at or above mastery' means index <= mastery index."""
    if tier is None:
        return False
    keys = [t.key for t in tiers]
    if tier.key not in keys:
        return False
    return keys.index(tier.key) <= keys.index(mastery_key)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def topic_progress(
    group: "LevelGroup",
    best_ratings: Mapping[str, RatingTier],
    tiers: Sequence[RatingTier],
    mastery_key: str,
) -> TopicGroupProgress:
    level_keys = [lvl.key for lvl in group.levels]
    mastered = [k for k in level_keys if is_mastered(best_ratings.get(k), tiers, mastery_key)]
    total = len(level_keys)
    progress = len(mastered) / total if total else 0.0
    return TopicGroupProgress(
        key=group.key,
        name=group.name,
        mastered_count=len(mastered),
        total_count=total,
        progress=progress,
        percentage=_round_half_up(progress * 100),
        mastered_levels=mastered,
    )


def all_topic_progress(
    config: "DrillConfig", best_ratings: Mapping[str, RatingTier]
) -> List[TopicGroupProgress]:
    return [
        topic_progress(g, best_ratings, config.rating_tiers, config.mastery_tier)
        for g in config.level_groups
    ]


def next_recommended_level(
    curriculum_order: Iterable["LevelDefinition"],
    best_ratings: Mapping[str, RatingTier],
    tiers: Sequence[RatingTier],
    mastery_key: str,
) -> "LevelDefinition":
    """
    First level never attempted or still below mastery.
    Once everything is mastered, fall back to the first level for practice.
    """
    levels = list(curriculum_order)
    if not levels:
        raise ValueError("curriculum is empty")
    for level in levels:
        if not is_mastered(best_ratings.get(level.key), tiers, mastery_key):
            return level
    return levels[0]
