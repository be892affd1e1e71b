from datetime import UTC, date, datetime

import pytest

from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import Learner, LearnerStats, level_for


def _learner() -> Learner:
    return Learner.create(LearnerId(1), datetime(2026, 3, 1, tzinfo=UTC))


def test_first_activity_starts_streak() -> None:
    """Test the first active day gives a streak of one."""
    learner = _learner()

    assert learner.record_activity(date(2026, 3, 2)) is True
    assert learner.current_streak == 1
    assert learner.longest_streak == 1


def test_same_day_activity_is_noop() -> None:
    """Test several activities on one day count once."""
    learner = _learner()
    learner.record_activity(date(2026, 3, 2))

    assert learner.record_activity(date(2026, 3, 2)) is False
    assert learner.current_streak == 1


def test_consecutive_days_extend_streak() -> None:
    """Test each following day adds one."""
    learner = _learner()
    for day in (2, 3, 4):
        learner.record_activity(date(2026, 3, day))

    assert learner.current_streak == 3
    assert learner.longest_streak == 3


def test_gap_resets_streak_but_keeps_longest() -> None:
    """Test a missed day restarts the streak."""
    learner = _learner()
    for day in (2, 3, 4, 6):
        learner.record_activity(date(2026, 3, day))

    assert learner.current_streak == 1
    assert learner.longest_streak == 3


def test_streak_crosses_month_boundary() -> None:
    """Test consecutive calendar days across months still count."""
    learner = _learner()
    learner.record_activity(date(2026, 2, 28))
    learner.record_activity(date(2026, 3, 1))

    assert learner.current_streak == 2


def test_earlier_activity_does_not_rewind() -> None:
    """Test a late-arriving older day leaves the streak alone."""
    learner = _learner()
    learner.record_activity(date(2026, 3, 5))

    assert learner.record_activity(date(2026, 3, 4)) is False
    assert learner.last_activity_date == date(2026, 3, 5)
    assert learner.current_streak == 1


def test_community_posts_validation() -> None:
    """Test the reported post count cannot be negative."""
    learner = _learner()
    learner.report_community_posts(12)

    with pytest.raises(ValidationError):
        learner.report_community_posts(-1)

    assert learner.community_posts == 12


def test_stats_value_of() -> None:
    """Test stat lookup by stat type name."""
    stats = LearnerStats(total_xp=250, quizzes_passed=2)

    assert stats.value_of("total_xp") == 250
    assert stats.value_of("quizzes_passed") == 2
    assert stats.value_of("community_posts") == 0


@pytest.mark.parametrize(
    ("total_xp", "level"),
    [(0, 1), (99, 1), (100, 2), (250, 3), (1000, 11)],
)
def test_level_for(total_xp: int, level: int) -> None:
    """Test one level per 100 XP, starting at level 1."""
    assert level_for(total_xp) == level


def test_level_for_custom_bracket() -> None:
    """Test the bracket size is configurable but must be positive."""
    assert level_for(250, xp_per_level=50) == 6
    with pytest.raises(ValidationError):
        level_for(250, xp_per_level=0)
