import pytest

from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.learning.services.quiz_scoring_service import (
    QuizScoringService,
    round_half_up_percent,
)

TIERS = [(90, 100), (80, 75), (70, 50), (60, 25)]


@pytest.mark.parametrize(
    ("correct", "total", "expected"),
    [
        (7, 10, 70),
        (9, 13, 69),
        (1, 8, 13),
        (3, 8, 38),
        (2, 3, 67),
        (1, 3, 33),
        (0, 5, 0),
        (5, 5, 100),
    ],
)
def test_round_half_up_percent(correct: int, total: int, expected: int) -> None:
    """Test percentages round to the nearest integer with halves going up."""
    assert round_half_up_percent(correct, total) == expected


def test_round_half_up_rejects_empty_quiz() -> None:
    """Test scoring zero questions is an error."""
    with pytest.raises(ValidationError):
        round_half_up_percent(0, 0)


def test_unanswered_questions_are_wrong() -> None:
    """Test missing answers do not count as correct."""
    service = QuizScoringService()

    score = service.score_percent({1: 0, 2: 1, 3: 2, 4: 3}, {1: 0, 2: 1})

    assert score == 50


def test_score_is_deterministic() -> None:
    """Test the same answers always give the same score."""
    service = QuizScoringService()
    key = {n: n % 4 for n in range(1, 14)}
    answers = {n: n % 4 for n in range(1, 10)}

    assert {service.score_percent(key, answers) for _ in range(5)} == {69}


@pytest.mark.parametrize(
    ("score", "xp"),
    [(100, 100), (90, 100), (89, 75), (80, 75), (70, 50), (69, 25), (60, 25), (59, 0)],
)
def test_tier_lookup_boundaries(score: int, xp: int) -> None:
    """Test tier thresholds are inclusive and scores below every tier earn 0."""
    assert QuizScoringService().tier_xp(TIERS, score) == xp


def test_passing_threshold_is_inclusive() -> None:
    """Test a score equal to the passing mark passes."""
    service = QuizScoringService()

    assert service.is_passing(70, 70) is True
    assert service.is_passing(69, 70) is False
