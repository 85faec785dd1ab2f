# services/drills/catalog.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

import curriculum
from generator import Family, Question, generate
from rating import RatingTier, rate, validate_tiers

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "DRILLS_CONFIG_PATH"


class LevelDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)
    key: str
    name: str
    family: Family
    params: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_params(self) -> "LevelDefinition":
        p = self.params
        if self.family == Family.BONDS:
            rng = p.get("custom_range")
            if rng is not None:
                if len(rng) != 2 or rng[0] > rng[1]:
                    raise ValueError(f"{self.key}: custom_range must be [min, max]")
            elif not isinstance(p.get("value"), int):
                raise ValueError(f"{self.key}: bonds need an integer value or a custom_range")
        elif self.family == Family.SINGLE_TABLE:
            if not isinstance(p.get("table"), int) or p["table"] == 0:
                raise ValueError(f"{self.key}: singleTable needs a non-zero table")
        elif self.family in (Family.GROUP_TABLES, Family.NEGATIVE_TABLES):
            tables = p.get("tables")
            if not tables or any(not isinstance(t, int) or t == 0 for t in tables):
                raise ValueError(f"{self.key}: {self.family.value} needs non-zero tables")
        elif self.family == Family.DOUBLING:
            if int(p.get("max_number", 100)) < 1:
                raise ValueError(f"{self.key}: max_number must be >= 1")
        return self

    def generate(self, rng: Any = None) -> Question:
        return generate(self.family, self.params, rng=rng)


class LevelGroup(BaseModel):
    model_config = ConfigDict(frozen=True)
    key: str
    name: str
    levels: List[LevelDefinition]


class DrillConfig(BaseModel):
    """Immutable curriculum + rating configuration, passed explicitly."""

    model_config = ConfigDict(frozen=True)
    level_groups: List[LevelGroup]
    required_streak: int = Field(default=curriculum.REQUIRED_STREAK, ge=1)
    rating_tiers: List[RatingTier]
    mastery_tier: str = curriculum.MASTERY_TIER
    difficulty_multipliers: Dict[str, float] = Field(default_factory=dict)

    @field_validator("rating_tiers")
    @classmethod
    def _tiers(cls, v: List[RatingTier]) -> List[RatingTier]:
        return validate_tiers(v)

    @field_validator("difficulty_multipliers")
    @classmethod
    def _multipliers(cls, v: Dict[str, float]) -> Dict[str, float]:
        bad = [k for k, m in v.items() if m <= 0]
        if bad:
            raise ValueError(f"difficulty multipliers must be positive: {bad}")
        return v

    @model_validator(mode="after")
    def _consistency(self) -> "DrillConfig":
        if self.mastery_tier not in {t.key for t in self.rating_tiers}:
            raise ValueError(f"mastery_tier {self.mastery_tier!r} is not a rating tier")
        keys = [lvl.key for lvl in self.levels]
        dupes = sorted({k for k in keys if keys.count(k) > 1})
        if dupes:
            raise ValueError(f"duplicate level keys: {dupes}")
        if not keys:
            raise ValueError("curriculum has no levels")
        return self

    @property
    def levels(self) -> List[LevelDefinition]:
        """All levels flattened in curriculum order."""
        return [lvl for g in self.level_groups for lvl in g.levels]

    def get_level(self, key: str) -> Optional[LevelDefinition]:
        return next((lvl for lvl in self.levels if lvl.key == key), None)

    def group_of(self, key: str) -> Optional[LevelGroup]:
        return next((g for g in self.level_groups if any(l.key == key for l in g.levels)), None)

    def rate(self, elapsed_seconds: float, level_key: str) -> RatingTier:
        return rate(
            elapsed_seconds,
            level_key,
            self.required_streak,
            self.difficulty_multipliers,
            self.rating_tiers,
        )


def default_config_data() -> Dict[str, Any]:
    return {
        "level_groups": curriculum.LEVEL_GROUPS,
        "required_streak": curriculum.REQUIRED_STREAK,
        "rating_tiers": curriculum.RATING_TIERS,
        "mastery_tier": curriculum.MASTERY_TIER,
        "difficulty_multipliers": curriculum.DIFFICULTY_MULTIPLIERS,
    }


def _read_override(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{p}: config root must be a JSON object")
    return data


def build_config(override: Optional[Dict[str, Any]] = None) -> DrillConfig:
    data = default_config_data()
    if override:
        data.update(override)
    return DrillConfig.model_validate(data)


class Catalog:
    _config: Optional[DrillConfig] = None

    @classmethod
    def load(cls) -> DrillConfig:
        if cls._config is None:
            cls.reload()
        return cls._config

    @classmethod
    def reload(cls) -> DrillConfig:
        override = None
        path = os.getenv(CONFIG_PATH_ENV)
        if path:
            override = _read_override(Path(path))
            logger.info("loading drill config override from %s", path)
        cls._config = build_config(override)
        logger.info(
            "drill config loaded: %d groups, %d levels",
            len(cls._config.level_groups),
            len(cls._config.levels),
        )
        return cls._config


# Public API
def get_config() -> DrillConfig:
    return Catalog.load()


def reload_config() -> DrillConfig:
    return Catalog.reload()
