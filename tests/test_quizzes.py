"""Tests for timed quiz attempts through the events endpoint."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tests.conftest import FakeClock

LEARNER_ID = 7
TIERS = [
    {"min_score": 60, "xp": 25},
    {"min_score": 90, "xp": 100},
    {"min_score": 70, "xp": 50},
    {"min_score": 80, "xp": 75},
]


@pytest.fixture
def quiz(client: TestClient) -> dict[str, Any]:
    """Ten four-option questions whose correct answer is always option 0."""
    response = client.post(
        "/api/v1/content/quizzes",
        json={
            "title": "Python Fundamentals",
            "time_limit_seconds": 600,
            "passing_score_percent": 70,
            "questions": [
                {"prompt": f"Question {n}", "option_count": 4, "correct_index": 0}
                for n in range(1, 11)
            ],
            "reward_tiers": TIERS,
        },
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["quiz"]


def _start(send_event: Callable[..., Any], quiz: dict[str, Any], learner_id: int) -> int:
    response = send_event("QuizAttemptStart", learner_id=learner_id, quiz_id=quiz["id"])
    assert response.status_code == status.HTTP_200_OK, response.text
    return response.json()["result"]["attempt_id"]


def _answer(
    send_event: Callable[..., Any], quiz: dict[str, Any], attempt_id: int, correct: int
) -> None:
    for position, question in enumerate(quiz["questions"]):
        response = send_event(
            "QuizAnswerSubmit",
            attempt_id=attempt_id,
            question_id=question["id"],
            answer_index=0 if position < correct else 1,
        )
        assert response.status_code == status.HTTP_200_OK, response.text


class TestQuizContent:
    """Test suite for quiz authoring."""

    def test_tiers_are_stored_descending(self, quiz: dict[str, Any]) -> None:
        """Test reward tiers come back sorted by min_score descending."""
        assert [tier["min_score"] for tier in quiz["reward_tiers"]] == [90, 80, 70, 60]
        assert quiz["version"] == 1
        assert "correct_index" not in quiz["questions"][0]

    def test_duplicate_tier_threshold_rejected(self, client: TestClient) -> None:
        """Test two tiers with the same min_score are a configuration error."""
        response = client.post(
            "/api/v1/content/quizzes",
            json={
                "title": "Broken",
                "time_limit_seconds": 60,
                "passing_score_percent": 50,
                "questions": [{"prompt": "Q", "option_count": 2, "correct_index": 0}],
                "reward_tiers": [{"min_score": 70, "xp": 10}, {"min_score": 70, "xp": 20}],
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "configuration_error"

    def test_tier_out_of_range_rejected(self, client: TestClient) -> None:
        """Test a min_score above 100 is a configuration error."""
        response = client.post(
            "/api/v1/content/quizzes",
            json={
                "title": "Broken",
                "time_limit_seconds": 60,
                "passing_score_percent": 50,
                "questions": [{"prompt": "Q", "option_count": 2, "correct_index": 0}],
                "reward_tiers": [{"min_score": 101, "xp": 10}],
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "configuration_error"

    def test_replace_reward_tiers_bumps_version(
        self, client: TestClient, quiz: dict[str, Any]
    ) -> None:
        """Test replacing the tier table stores it and bumps the version."""
        response = client.put(
            f"/api/v1/content/quizzes/{quiz['id']}/reward-tiers",
            json={"reward_tiers": [{"min_score": 50, "xp": 10}]},
        )

        assert response.status_code == status.HTTP_200_OK
        updated = response.json()["quiz"]
        assert updated["version"] == 2
        assert updated["reward_tiers"] == [{"min_score": 50, "xp": 10}]

    def test_open_attempt_keeps_tiers_it_started_with(
        self,
        client: TestClient,
        quiz: dict[str, Any],
        send_event: Callable[..., Any],
    ) -> None:
        """Test a tier change during an attempt does not change that attempt's reward."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        client.put(
            f"/api/v1/content/quizzes/{quiz['id']}/reward-tiers",
            json={"reward_tiers": [{"min_score": 50, "xp": 10}]},
        )
        _answer(send_event, quiz, attempt_id, correct=7)

        response = send_event("QuizSubmit", attempt_id=attempt_id)

        assert response.json()["result"]["xp_awarded"] == 50
        attempt = client.get(f"/api/v1/quiz-attempts/{attempt_id}").json()
        assert attempt["quiz_version"] == 1


class TestQuizScoring:
    """Test suite for quiz submission and tier rewards."""

    def test_score_at_tier_boundary_earns_tier_xp(
        self, client: TestClient, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test 7 of 10 correct scores 70, passes and earns the 70 tier (50 XP)."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, attempt_id, correct=7)

        response = send_event("QuizSubmit", attempt_id=attempt_id)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["duplicate"] is False
        assert data["result"]["score_percent"] == 70
        assert data["result"]["passed"] is True
        assert data["result"]["xp_awarded"] == 50

        progress = client.get(f"/api/v1/learners/{LEARNER_ID}/progress").json()
        assert progress["total_xp"] == 50

    def test_failing_score_earns_nothing(
        self, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test a failing score earns no XP even when a lower tier matches."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, attempt_id, correct=6)

        result = send_event("QuizSubmit", attempt_id=attempt_id).json()["result"]

        assert result["score_percent"] == 60
        assert result["passed"] is False
        assert result["xp_awarded"] == 0

    def test_unanswered_questions_count_as_wrong(
        self, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test submitting with no answers scores 0."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)

        result = send_event("QuizSubmit", attempt_id=attempt_id).json()["result"]

        assert result["score_percent"] == 0
        assert result["passed"] is False

    def test_resubmit_returns_stored_result(
        self, client: TestClient, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test submitting a locked attempt again is a duplicate with the same result."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, attempt_id, correct=10)
        first = send_event("QuizSubmit", attempt_id=attempt_id).json()

        second = send_event("QuizSubmit", attempt_id=attempt_id).json()

        assert second["duplicate"] is True
        assert second["result"] == first["result"]
        progress = client.get(f"/api/v1/learners/{LEARNER_ID}/progress").json()
        assert progress["total_xp"] == 100

    def test_second_passing_attempt_earns_no_more_xp(
        self, client: TestClient, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test quiz XP is credited once per learner and quiz."""
        first_attempt = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, first_attempt, correct=8)
        send_event("QuizSubmit", attempt_id=first_attempt)

        second_attempt = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, second_attempt, correct=10)
        result = send_event("QuizSubmit", attempt_id=second_attempt).json()["result"]

        assert result["score_percent"] == 100
        assert result["xp_awarded"] == 0
        progress = client.get(f"/api/v1/learners/{LEARNER_ID}/progress").json()
        assert progress["total_xp"] == 75

    def test_answer_overwrites_previous_answer(
        self, client: TestClient, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test answering the same question twice keeps the last answer."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        question_id = quiz["questions"][0]["id"]
        send_event(
            "QuizAnswerSubmit", attempt_id=attempt_id, question_id=question_id, answer_index=3
        )
        send_event(
            "QuizAnswerSubmit", attempt_id=attempt_id, question_id=question_id, answer_index=0
        )

        attempt = client.get(f"/api/v1/quiz-attempts/{attempt_id}").json()

        assert attempt["answers"] == {str(question_id): 0}

    def test_out_of_range_answer_rejected(
        self, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test an answer index beyond the options is a validation error."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)

        response = send_event(
            "QuizAnswerSubmit",
            attempt_id=attempt_id,
            question_id=quiz["questions"][0]["id"],
            answer_index=4,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "validation_error"

    def test_answer_to_locked_attempt_rejected(
        self, quiz: dict[str, Any], send_event: Callable[..., Any]
    ) -> None:
        """Test answering after submission is rejected."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        send_event("QuizSubmit", attempt_id=attempt_id)

        response = send_event(
            "QuizAnswerSubmit",
            attempt_id=attempt_id,
            question_id=quiz["questions"][0]["id"],
            answer_index=0,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "attempt_locked"


class TestQuizDeadline:
    """Test suite for lazy deadline enforcement."""

    def test_answer_after_deadline_locks_and_scores(
        self,
        client: TestClient,
        clock: FakeClock,
        quiz: dict[str, Any],
        send_event: Callable[..., Any],
    ) -> None:
        """Test a late answer is rejected but the attempt is locked and scored."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        _answer(send_event, quiz, attempt_id, correct=10)
        started = client.get(f"/api/v1/quiz-attempts/{attempt_id}").json()

        clock.advance(seconds=601)
        response = send_event(
            "QuizAnswerSubmit",
            attempt_id=attempt_id,
            question_id=quiz["questions"][0]["id"],
            answer_index=1,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["error"] == "attempt_locked"
        assert body["details"]["expired"] is True

        attempt = client.get(f"/api/v1/quiz-attempts/{attempt_id}").json()
        assert attempt["locked"] is True
        assert attempt["score_percent"] == 100
        assert attempt["submitted_at"] == started["deadline"]
        assert attempt["xp_awarded"] == 100

        resubmit = send_event("QuizSubmit", attempt_id=attempt_id).json()
        assert resubmit["duplicate"] is True

    def test_reading_expired_attempt_does_not_lock_it(
        self,
        client: TestClient,
        clock: FakeClock,
        quiz: dict[str, Any],
        send_event: Callable[..., Any],
    ) -> None:
        """Test GET on an expired attempt reports expired without locking."""
        attempt_id = _start(send_event, quiz, LEARNER_ID)
        clock.advance(seconds=700)

        attempt = client.get(f"/api/v1/quiz-attempts/{attempt_id}").json()

        assert attempt["expired"] is True
        assert attempt["locked"] is False
        assert attempt["score_percent"] is None

    def test_unknown_attempt(self, client: TestClient) -> None:
        """Test reading a non-existent attempt returns 404."""
        response = client.get("/api/v1/quiz-attempts/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
