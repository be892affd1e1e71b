"""Tests for challenge participation."""

from collections.abc import Callable
from datetime import timedelta
from typing import Any

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tests.conftest import START_TIME, FakeClock


@pytest.fixture
def create_challenge(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory fixture for a challenge relative to the test clock's start."""

    def _create(
        starts_in: timedelta = timedelta(hours=-1),
        lasts: timedelta = timedelta(hours=2),
        **fields: Any,
    ) -> dict[str, Any]:
        start_at = START_TIME + starts_in
        response = client.post(
            "/api/v1/content/challenges",
            json={
                "title": "Weekend Sprint",
                "start_at": start_at.isoformat(),
                "end_at": (start_at + lasts).isoformat(),
                **fields,
            },
        )
        assert response.status_code == status.HTTP_201_CREATED, response.text
        return response.json()["challenge"]

    return _create


class TestChallengeContent:
    """Test suite for challenge authoring."""

    def test_end_before_start_rejected(self, client: TestClient) -> None:
        """Test a challenge must end after it starts."""
        response = client.post(
            "/api/v1/content/challenges",
            json={
                "title": "Backwards",
                "start_at": START_TIME.isoformat(),
                "end_at": (START_TIME - timedelta(hours=1)).isoformat(),
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "configuration_error"

    @pytest.mark.parametrize(
        ("start_at", "end_at"),
        [
            ("2026-03-02T10:00:00", "2026-03-02T12:00:00+00:00"),
            ("2026-03-02T10:00:00", "2026-03-02T12:00:00"),
        ],
    )
    def test_times_without_offset_rejected(
        self, client: TestClient, start_at: str, end_at: str
    ) -> None:
        """Test challenge times must carry a UTC offset."""
        response = client.post(
            "/api/v1/content/challenges",
            json={"title": "Naive", "start_at": start_at, "end_at": end_at},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "validation_error"

    def test_unknown_reward_badge_rejected(self, client: TestClient) -> None:
        """Test the reward badge must exist."""
        response = client.post(
            "/api/v1/content/challenges",
            json={
                "title": "Orphan",
                "start_at": START_TIME.isoformat(),
                "end_at": (START_TIME + timedelta(hours=1)).isoformat(),
                "badge_reward_id": 999,
            },
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestChallengeJoin:
    """Test suite for joining challenges."""

    def test_join_active_challenge(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test joining inside the window records the participation."""
        challenge = create_challenge()

        response = send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["duplicate"] is False
        assert data["result"]["challenge_id"] == challenge["id"]

    def test_join_twice_is_duplicate(
        self,
        clock: FakeClock,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test a repeated join returns the original participation, even after close."""
        challenge = create_challenge()
        first = send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"]).json()
        clock.advance(hours=3)

        second = send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"]).json()

        assert second["duplicate"] is True
        assert second["result"]["joined_at"] == first["result"]["joined_at"]

    def test_join_before_start_rejected(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test joining a scheduled challenge fails."""
        challenge = create_challenge(starts_in=timedelta(hours=1))

        response = send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["error"] == "challenge_not_active"
        assert body["details"]["status"] == "scheduled"

    def test_join_after_end_rejected(
        self,
        clock: FakeClock,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test the window is half-open: joining at end_at fails."""
        challenge = create_challenge()
        clock.advance(hours=1)

        response = send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["details"]["status"] == "closed"

    def test_capacity_is_enforced(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test only max_participants learners get in."""
        challenge = create_challenge(max_participants=2)

        statuses = [
            send_event("ChallengeJoin", learner_id=learner, challenge_id=challenge["id"])
            for learner in (1, 2, 3)
        ]

        assert [r.status_code for r in statuses] == [200, 200, 409]
        assert statuses[2].json()["error"] == "capacity_exceeded"

    def test_unlimited_capacity(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test max_participants 0 never fills up."""
        challenge = create_challenge(max_participants=0)

        for learner in range(1, 6):
            response = send_event("ChallengeJoin", learner_id=learner, challenge_id=challenge["id"])
            assert response.status_code == status.HTTP_200_OK

    def test_unknown_challenge(self, send_event: Callable[..., Any]) -> None:
        """Test joining a non-existent challenge returns 404."""
        response = send_event("ChallengeJoin", learner_id=1, challenge_id=999)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "not_found"


class TestChallengeComplete:
    """Test suite for completing challenges."""

    def test_complete_awards_xp_and_reward_badge(
        self,
        client: TestClient,
        create_challenge: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test completion credits the challenge XP and grants the attached badge."""
        trophy = define_badge("Sprinter", [("challenges_completed", ">=", 50)], xp_reward=5)
        challenge = create_challenge(xp_reward=40, badge_reward_id=trophy["id"])
        send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])

        response = send_event("ChallengeComplete", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_200_OK
        result = response.json()["result"]
        assert result["xp_awarded"] == 40
        assert result["reward_badge"] == {"id": trophy["id"], "name": "Sprinter", "xp_reward": 5}

        progress = client.get("/api/v1/learners/1/progress").json()
        assert progress["total_xp"] == 45
        assert [b["badge_id"] for b in progress["badges_earned"]] == [trophy["id"]]

    def test_complete_twice_is_duplicate(
        self,
        client: TestClient,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test a second completion changes nothing."""
        challenge = create_challenge(xp_reward=40)
        send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])
        send_event("ChallengeComplete", learner_id=1, challenge_id=challenge["id"])

        response = send_event("ChallengeComplete", learner_id=1, challenge_id=challenge["id"])

        assert response.json()["duplicate"] is True
        assert response.json()["result"]["xp_awarded"] == 0
        assert client.get("/api/v1/learners/1/progress").json()["total_xp"] == 40

    def test_complete_without_joining_rejected(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test completion requires a participation."""
        challenge = create_challenge()

        response = send_event("ChallengeComplete", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "invalid_transition"

    def test_late_completion_rejected(
        self,
        client: TestClient,
        clock: FakeClock,
        create_challenge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test completing after end_at is rejected and earns nothing."""
        challenge = create_challenge(xp_reward=40)
        send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])
        clock.advance(hours=2)

        response = send_event("ChallengeComplete", learner_id=1, challenge_id=challenge["id"])

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "late_submission"
        assert client.get("/api/v1/learners/1/progress").json()["total_xp"] == 0

    def test_completion_feeds_challenge_badges(
        self,
        create_challenge: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test challenges_completed is counted for badge rules."""
        badge = define_badge("Competitor", [("challenges_completed", ">=", 1)])
        challenge = create_challenge()
        send_event("ChallengeJoin", learner_id=1, challenge_id=challenge["id"])

        result = send_event(
            "ChallengeComplete", learner_id=1, challenge_id=challenge["id"]
        ).json()["result"]

        assert [b["id"] for b in result["badges_awarded"]] == [badge["id"]]
