"""Tests for badge definitions, unlocks and progress."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import status
from fastapi.testclient import TestClient

LEARNER_ID = 3


def _complete_lessons(
    send_event: Callable[..., Any], module: dict[str, Any], count: int, learner_id: int
) -> list[dict[str, Any]]:
    results = []
    for lesson in module["lessons"][:count]:
        response = send_event("LessonCompleted", learner_id=learner_id, lesson_id=lesson["id"])
        assert response.status_code == status.HTTP_200_OK, response.text
        results.append(response.json())
    return results


class TestBadgeDefinition:
    """Test suite for authoring badge rules."""

    def test_define_badge(self, client: TestClient) -> None:
        """Test a valid definition is stored with version 1."""
        response = client.post(
            "/api/v1/content/badges",
            json={
                "name": "Dedicated",
                "description": "Five lessons and 200 XP",
                "xp_reward": 10,
                "conditions": [
                    {"stat_type": "lessons_completed", "operator": ">=", "threshold": 5},
                    {"stat_type": "total_xp", "operator": ">=", "threshold": 200},
                ],
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        badge = response.json()["badge"]
        assert badge["version"] == 1
        assert len(badge["conditions"]) == 2

    @pytest.mark.parametrize(
        "conditions",
        [
            [{"stat_type": "forum_likes", "operator": ">=", "threshold": 1}],
            [{"stat_type": "total_xp", "operator": "~=", "threshold": 1}],
            [{"stat_type": "total_xp", "operator": ">=", "threshold": -5}],
            [],
        ],
        ids=["unknown-stat", "unknown-operator", "negative-threshold", "no-conditions"],
    )
    def test_invalid_definition_rejected(
        self, client: TestClient, conditions: list[dict[str, Any]]
    ) -> None:
        """Test malformed rules are rejected when saved."""
        response = client.post(
            "/api/v1/content/badges", json={"name": "Broken", "conditions": conditions}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "configuration_error"

    def test_redefine_badge_bumps_version(
        self, client: TestClient, define_badge: Callable[..., dict[str, Any]]
    ) -> None:
        """Test updating a badge replaces its rules and bumps the version."""
        badge = define_badge("Reader", [("lessons_completed", ">=", 3)])

        response = client.put(
            f"/api/v1/content/badges/{badge['id']}",
            json={
                "name": "Avid Reader",
                "conditions": [
                    {"stat_type": "lessons_completed", "operator": ">=", "threshold": 10}
                ],
            },
        )

        assert response.status_code == status.HTTP_200_OK
        updated = response.json()["badge"]
        assert updated["name"] == "Avid Reader"
        assert updated["version"] == 2
        assert updated["conditions"][0]["threshold"] == 10

    def test_redefine_unknown_badge(self, client: TestClient) -> None:
        """Test updating a non-existent badge returns 404."""
        response = client.put(
            "/api/v1/content/badges/999",
            json={
                "name": "Ghost",
                "conditions": [{"stat_type": "total_xp", "operator": ">", "threshold": 0}],
            },
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestBadgeUnlock:
    """Test suite for badge rule evaluation on learner events."""

    def test_conjunctive_badge_awarded_once(
        self,
        client: TestClient,
        create_module: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test a badge needing 5 lessons AND 200 XP unlocks exactly once."""
        badge = define_badge(
            "Dedicated", [("lessons_completed", ">=", 5), ("total_xp", ">=", 200)]
        )
        module = create_module([(f"Lesson {n}", 50) for n in range(1, 8)])

        results = _complete_lessons(send_event, module, 7, LEARNER_ID)

        # 4 lessons give 200 XP but only 4 lessons; the 5th satisfies both
        assert [r["result"]["badges_awarded"] for r in results[:4]] == [[]] * 4
        assert results[4]["result"]["badges_awarded"] == [
            {"id": badge["id"], "name": "Dedicated", "xp_reward": 0}
        ]
        assert results[5]["result"]["badges_awarded"] == []
        assert results[6]["result"]["badges_awarded"] == []

        progress = client.get(f"/api/v1/learners/{LEARNER_ID}/progress").json()
        assert [b["badge_id"] for b in progress["badges_earned"]] == [badge["id"]]

    def test_badge_bonus_can_unlock_another_badge(
        self,
        client: TestClient,
        create_module: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test one badge's XP bonus triggers an XP-based badge in the same event."""
        first_step = define_badge("First Step", [("lessons_completed", ">=", 1)], xp_reward=90)
        century = define_badge("Century", [("total_xp", ">=", 100)])
        module = create_module([("Intro", 10)])

        result = _complete_lessons(send_event, module, 1, LEARNER_ID)[0]["result"]

        assert [b["id"] for b in result["badges_awarded"]] == [first_step["id"], century["id"]]
        progress = client.get(f"/api/v1/learners/{LEARNER_ID}/progress").json()
        assert progress["total_xp"] == 100
        assert progress["level"] == 2

    def test_badge_xp_bonus_is_in_ledger(
        self,
        client: TestClient,
        create_module: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test the unlock bonus is recorded as a badge ledger entry."""
        badge = define_badge("First Step", [("lessons_completed", ">=", 1)], xp_reward=25)
        module = create_module([("Intro", 10)])
        _complete_lessons(send_event, module, 1, LEARNER_ID)

        history = client.get(f"/api/v1/learners/{LEARNER_ID}/xp-transactions").json()

        sources = {(t["source_type"], t["source_id"], t["amount"]) for t in history["transactions"]}
        assert ("badge", badge["id"], 25) in sources
        assert history["total_xp"] == 35


class TestBadgeProgress:
    """Test suite for the badge progress query."""

    def test_progress_is_weakest_condition(
        self,
        client: TestClient,
        create_module: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test progress reports the least satisfied condition."""
        define_badge("Dedicated", [("lessons_completed", ">=", 5), ("total_xp", ">=", 200)])
        module = create_module([(f"Lesson {n}", 20) for n in range(1, 6)])
        _complete_lessons(send_event, module, 4, LEARNER_ID)

        response = client.get(f"/api/v1/learners/{LEARNER_ID}/badge-progress")

        assert response.status_code == status.HTTP_200_OK
        [entry] = response.json()["badges"]
        # lessons 4/5 = 80%, xp 80/200 = 40%
        assert entry["progress_percent"] == 40
        assert entry["earned"] is False
        assert entry["awarded_at"] is None

    def test_earned_badge_reports_full_progress(
        self,
        client: TestClient,
        create_module: Callable[..., dict[str, Any]],
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test an earned badge shows 100 with its award time."""
        define_badge("First Step", [("lessons_completed", ">=", 1)])
        module = create_module([("Intro", 10)])
        _complete_lessons(send_event, module, 1, LEARNER_ID)

        [entry] = client.get(f"/api/v1/learners/{LEARNER_ID}/badge-progress").json()["badges"]

        assert entry["earned"] is True
        assert entry["progress_percent"] == 100
        assert entry["awarded_at"] is not None

    def test_unknown_learner_sees_zero_progress(
        self, client: TestClient, define_badge: Callable[..., dict[str, Any]]
    ) -> None:
        """Test a learner with no events gets 0% everywhere."""
        define_badge("Century", [("total_xp", ">=", 100)])

        [entry] = client.get("/api/v1/learners/404/badge-progress").json()["badges"]

        assert entry["progress_percent"] == 0


class TestCommunityPosts:
    """Test suite for community post count updates."""

    def test_post_count_unlocks_badge(
        self,
        define_badge: Callable[..., dict[str, Any]],
        send_event: Callable[..., Any],
    ) -> None:
        """Test reaching the post threshold awards the community badge."""
        badge = define_badge("Helpful", [("community_posts", ">=", 10)])

        below = send_event("CommunityPostsUpdated", learner_id=LEARNER_ID, post_count=9).json()
        reached = send_event("CommunityPostsUpdated", learner_id=LEARNER_ID, post_count=10).json()

        assert below["result"]["badges_awarded"] == []
        assert [b["id"] for b in reached["result"]["badges_awarded"]] == [badge["id"]]

    def test_same_count_is_duplicate(self, send_event: Callable[..., Any]) -> None:
        """Test reporting an unchanged count is a no-op."""
        send_event("CommunityPostsUpdated", learner_id=LEARNER_ID, post_count=4)

        response = send_event("CommunityPostsUpdated", learner_id=LEARNER_ID, post_count=4)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["duplicate"] is True

    def test_negative_count_rejected(self, send_event: Callable[..., Any]) -> None:
        """Test a negative post count fails request validation."""
        response = send_event("CommunityPostsUpdated", learner_id=LEARNER_ID, post_count=-1)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
