import pytest

from catalog import build_config
from rating import RatingTier, adjusted_average, difficulty_multiplier, rate, validate_tiers

CONFIG = build_config()
TIERS = CONFIG.rating_tiers
MULT = CONFIG.difficulty_multipliers


def test_top_tier_boundary():
    # 22 / 15 = 1.467 <= 1.5
    assert rate(22, "bonds10", 15, MULT, TIERS).key == "true-mastery"
    # 23 / 15 = 1.533 > 1.5
    assert rate(23, "bonds10", 15, MULT, TIERS).key == "mastery"
    # bound is inclusive
    assert rate(22.5, "bonds10", 15, MULT, TIERS).key == "true-mastery"


def test_walks_all_tiers():
    assert rate(30, "bonds10", 15, MULT, TIERS).key == "mastery"
    assert rate(45, "bonds10", 15, MULT, TIERS).key == "expert"
    assert rate(60, "bonds10", 15, MULT, TIERS).key == "developing"
    assert rate(61, "bonds10", 15, MULT, TIERS).key == "beginner"
    assert rate(10_000, "bonds10", 15, MULT, TIERS).key == "beginner"


def test_multiplier_relaxes_threshold():
    # unitConversions allows 4x the time
    assert rate(88, "unitConversions", 15, MULT, TIERS).key == "true-mastery"
    assert rate(88, "bonds10", 15, MULT, TIERS).key == "beginner"


def test_multiplier_default():
    assert difficulty_multiplier("somethingNew", MULT) == 1.0
    assert difficulty_multiplier("somethingNew", {"default": 2.0}) == 2.0
    assert difficulty_multiplier("somethingNew", {}) == 1.0
    assert adjusted_average(30, "lcm", 15, MULT) == pytest.approx(1.0)


def test_config_rate_wrapper():
    assert CONFIG.rate(22, "bonds10").key == "true-mastery"


def test_preconditions():
    with pytest.raises(ValueError):
        rate(10, "bonds10", 0, MULT, TIERS)
    with pytest.raises(ValueError):
        rate(-1, "bonds10", 15, MULT, TIERS)


def test_validate_tiers():
    ok = [RatingTier(key="a", name="A", max_avg=1), RatingTier(key="b", name="B")]
    assert validate_tiers(ok) == ok
    with pytest.raises(ValueError):
        validate_tiers([RatingTier(key="a", name="A", max_avg=1)])
    with pytest.raises(ValueError):
        validate_tiers(
            [
                RatingTier(key="a", name="A", max_avg=2),
                RatingTier(key="b", name="B", max_avg=1),
                RatingTier(key="c", name="C"),
            ]
        )
    with pytest.raises(ValueError):
        validate_tiers([RatingTier(key="a", name="A"), RatingTier(key="b", name="B")])
    with pytest.raises(ValueError):
        validate_tiers([])
