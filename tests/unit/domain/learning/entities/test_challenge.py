from datetime import UTC, datetime, timedelta

import pytest

from rada_learning.domain.common.exceptions import ConfigurationError
from rada_learning.domain.common.value_objects import ChallengeId, LearnerId
from rada_learning.domain.learning.entities.challenge import (
    Challenge,
    ChallengeParticipation,
    ChallengeStatus,
)
from rada_learning.domain.learning.exceptions import (
    ChallengeNotActiveError,
    LateSubmissionError,
)

START = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
END = START + timedelta(hours=2)


def _challenge(**kwargs: int) -> Challenge:
    challenge = Challenge.create("Weekend Sprint", START, END, **kwargs)
    challenge.id = ChallengeId(1)
    return challenge


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (timedelta(seconds=-1), ChallengeStatus.SCHEDULED),
        (timedelta(0), ChallengeStatus.ACTIVE),
        (timedelta(hours=2) - timedelta(microseconds=1), ChallengeStatus.ACTIVE),
        (timedelta(hours=2), ChallengeStatus.CLOSED),
    ],
)
def test_status_window_is_half_open(offset: timedelta, expected: ChallengeStatus) -> None:
    """Test a challenge is active in [start_at, end_at)."""
    assert _challenge().status_at(START + offset) is expected


def test_join_outside_window_rejected() -> None:
    """Test joining before start or after end fails with the current status."""
    challenge = _challenge()

    with pytest.raises(ChallengeNotActiveError) as early:
        challenge.ensure_joinable(START - timedelta(minutes=1))
    with pytest.raises(ChallengeNotActiveError) as late:
        challenge.ensure_joinable(END)

    assert early.value.status == "scheduled"
    assert late.value.status == "closed"


def test_completion_after_end_is_late() -> None:
    """Test completing after end_at is a late submission."""
    challenge = _challenge()
    participation = ChallengeParticipation.create(LearnerId(1), challenge.id, START)

    with pytest.raises(LateSubmissionError):
        participation.complete(challenge, END + timedelta(seconds=1))

    assert participation.is_completed is False


def test_completion_is_idempotent() -> None:
    """Test a second completion reports a duplicate and keeps the first timestamp."""
    challenge = _challenge()
    participation = ChallengeParticipation.create(LearnerId(1), challenge.id, START)
    finished = START + timedelta(minutes=30)

    assert participation.complete(challenge, finished) is True
    assert participation.complete(challenge, finished + timedelta(minutes=5)) is False
    assert participation.completed_at == finished


def test_unlimited_when_zero() -> None:
    """Test max_participants 0 means no cap."""
    assert _challenge().is_unlimited is True
    assert _challenge(max_participants=3).is_unlimited is False


@pytest.mark.parametrize(
    "kwargs",
    [{"max_participants": -1}, {"xp_reward": -10}],
)
def test_invalid_limits(kwargs: dict[str, int]) -> None:
    """Test negative caps and rewards are rejected."""
    with pytest.raises(ConfigurationError):
        Challenge.create("Broken", START, END, **kwargs)


def test_empty_window_rejected() -> None:
    """Test end_at must be after start_at."""
    with pytest.raises(ConfigurationError):
        Challenge.create("Broken", START, START)
