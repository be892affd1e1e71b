import pytest

from rada_learning.domain.common.exceptions import ConfigurationError
from rada_learning.domain.common.value_objects import BadgeId
from rada_learning.domain.learning.entities.badge import (
    Badge,
    ComparisonOperator,
    StatType,
    UnlockCondition,
)
from rada_learning.domain.learning.entities.learner import LearnerStats


def _badge(*conditions: tuple[str, str, int]) -> Badge:
    badge = Badge.create(
        "Dedicated",
        [UnlockCondition.parse(stat, op, threshold) for stat, op, threshold in conditions],
    )
    badge.id = BadgeId(1)
    return badge


def test_parse_condition() -> None:
    """Test authored strings become typed conditions."""
    condition = UnlockCondition.parse("lessons_completed", ">=", 5)

    assert condition.stat_type is StatType.LESSONS_COMPLETED
    assert condition.operator is ComparisonOperator.GTE
    assert condition.to_primitive() == {
        "stat_type": "lessons_completed",
        "operator": ">=",
        "threshold": 5,
    }


@pytest.mark.parametrize(
    ("stat", "op", "threshold", "field"),
    [
        ("forum_likes", ">=", 1, "stat_type"),
        ("total_xp", "!=", 1, "operator"),
        ("total_xp", ">=", -1, "threshold"),
    ],
)
def test_invalid_condition(stat: str, op: str, threshold: int, field: str) -> None:
    """Test unknown stats, unknown operators and negative thresholds are rejected."""
    with pytest.raises(ConfigurationError) as exc_info:
        UnlockCondition.parse(stat, op, threshold)

    assert exc_info.value.field == field


def test_badge_needs_a_condition() -> None:
    """Test a badge without conditions cannot be defined."""
    with pytest.raises(ConfigurationError, match="at least one condition"):
        Badge.create("Empty", [])


def test_all_conditions_must_hold() -> None:
    """Test conditions are conjunctive."""
    badge = _badge(("lessons_completed", ">=", 5), ("total_xp", ">=", 200))

    assert badge.is_unlocked_by(LearnerStats(lessons_completed=5, total_xp=199)) is False
    assert badge.is_unlocked_by(LearnerStats(lessons_completed=4, total_xp=500)) is False
    assert badge.is_unlocked_by(LearnerStats(lessons_completed=5, total_xp=200)) is True


@pytest.mark.parametrize(
    ("op", "value", "expected"),
    [
        (">=", 3, True),
        (">=", 2, False),
        (">", 3, False),
        (">", 4, True),
        ("=", 3, True),
        ("=", 4, False),
        ("<", 2, True),
        ("<", 3, False),
        ("<=", 3, True),
        ("<=", 4, False),
    ],
)
def test_operators(op: str, value: int, expected: bool) -> None:
    """Test every comparison operator against a threshold of 3."""
    condition = UnlockCondition.parse("quizzes_passed", op, 3)

    assert condition.is_met(LearnerStats(quizzes_passed=value)) is expected


def test_progress_is_weakest_condition() -> None:
    """Test badge progress is the minimum over its conditions."""
    badge = _badge(("lessons_completed", ">=", 5), ("total_xp", ">=", 200))

    assert badge.progress_percent(LearnerStats(lessons_completed=4, total_xp=80)) == 40


def test_unmet_progress_never_reports_complete() -> None:
    """Test an unmet lower bound is capped below 100."""
    condition = UnlockCondition.parse("total_xp", ">=", 1000)

    assert condition.progress_percent(LearnerStats(total_xp=999)) == 99
    assert condition.progress_percent(LearnerStats(total_xp=1000)) == 100


def test_strict_bound_progress() -> None:
    """Test `> n` measures progress towards n + 1."""
    condition = UnlockCondition.parse("challenges_completed", ">", 3)

    assert condition.progress_percent(LearnerStats(challenges_completed=2)) == 50


def test_non_lower_bound_progress_is_all_or_nothing() -> None:
    """Test = and < conditions report 0 or 100."""
    equal = UnlockCondition.parse("current_streak", "=", 7)
    below = UnlockCondition.parse("community_posts", "<", 1)

    assert equal.progress_percent(LearnerStats(current_streak=6)) == 0
    assert equal.progress_percent(LearnerStats(current_streak=7)) == 100
    assert below.progress_percent(LearnerStats(community_posts=0)) == 100
    assert below.progress_percent(LearnerStats(community_posts=2)) == 0


def test_redefine_bumps_version() -> None:
    """Test redefining a badge replaces its rules and bumps the version."""
    badge = _badge(("total_xp", ">=", 100))

    badge.redefine("Big Earner", [UnlockCondition.parse("total_xp", ">=", 500)], xp_reward=20)

    assert badge.version == 2
    assert badge.name == "Big Earner"
    assert badge.is_unlocked_by(LearnerStats(total_xp=100)) is False


def test_redefine_validates() -> None:
    """Test an invalid redefinition leaves the badge untouched."""
    badge = _badge(("total_xp", ">=", 100))

    with pytest.raises(ConfigurationError):
        badge.redefine("Big Earner", [], xp_reward=20)

    assert badge.version == 1
    assert badge.name == "Dedicated"
