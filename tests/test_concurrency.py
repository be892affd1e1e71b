"""Tests for concurrent event handling against a shared database file."""

import threading
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from pathlib import Path

import pytest
from dependency_injector import providers
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from rada_learning import models
from rada_learning.config import Settings
from rada_learning.core import Container
from rada_learning.database import Base, build_engine
from rada_learning.domain.learning.exceptions import CapacityExceededError
from rada_learning.infrastructure.common.learner_locks import LearnerLockRegistry
from tests.conftest import START_TIME


@pytest.fixture
def session_factory(tmp_path: Path) -> Generator[sessionmaker[Session], None, None]:
    """Session factory over a file database so each thread gets its own connection."""
    settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'rada.db'}")
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


def _container(session: Session, locks: LearnerLockRegistry | None = None) -> Container:
    container = Container()
    container.db.override(session)
    if locks is not None:
        # One registry per process, as in the application container
        container.learner_locks.override(providers.Object(locks))
    container.clock.override(providers.Object(lambda: START_TIME))
    return container


class TestConcurrentChallengeJoins:
    """Test suite for the participant cap under simultaneous joins."""

    def test_capacity_never_exceeded(self, session_factory: sessionmaker[Session]) -> None:
        """Test three simultaneous joins for two slots admit exactly two learners."""
        with session_factory() as session:
            challenge = _container(session).content_use_case().create_challenge(
                title="Flash Challenge",
                start_at=START_TIME - timedelta(hours=1),
                end_at=START_TIME + timedelta(hours=1),
                max_participants=2,
            )

        barrier = threading.Barrier(3)

        def join(learner_id: int) -> str:
            with session_factory() as session:
                use_case = _container(session).challenge_use_case()
                barrier.wait()
                try:
                    use_case.join(learner_id, challenge.id.value)
                except CapacityExceededError:
                    return "full"
                return "joined"

        with ThreadPoolExecutor(max_workers=3) as executor:
            outcomes = list(executor.map(join, [1, 2, 3]))

        assert sorted(outcomes) == ["full", "joined", "joined"]

        with session_factory() as session:
            row = session.get(models.Challenge, challenge.id.value)
            assert row is not None
            assert row.participant_count == 2
            joined = session.scalar(
                select(func.count()).select_from(models.ChallengeParticipation)
            )
            assert joined == 2


class TestConcurrentQuizEvents:
    """Test suite for simultaneous events on one quiz attempt."""

    @pytest.fixture
    def attempt(self, session_factory: sessionmaker[Session]) -> tuple[int, list[int]]:
        """An open attempt by learner 1 and the ids of its two questions."""
        with session_factory() as session:
            container = _container(session)
            quiz = container.content_use_case().create_quiz(
                title="Pairs",
                time_limit_seconds=600,
                passing_score_percent=50,
                questions=[("First?", 4, 0), ("Second?", 4, 0)],
                reward_tiers=[(100, 60), (50, 30)],
            )
            started = container.quiz_attempt_use_case().start_attempt(1, quiz.id.value)
            return started.attempt_id, [question.id.value for question in quiz.questions]

    def test_answers_to_different_questions_are_all_kept(
        self, session_factory: sessionmaker[Session], attempt: tuple[int, list[int]]
    ) -> None:
        """Test two simultaneous answers on one attempt both end up stored."""
        attempt_id, question_ids = attempt
        locks = LearnerLockRegistry()
        barrier = threading.Barrier(2)

        def answer(question_id: int) -> None:
            with session_factory() as session:
                # The attempt is already in this session before the event arrives
                session.get(models.QuizAttempt, attempt_id)
                use_case = _container(session, locks).quiz_attempt_use_case()
                barrier.wait()
                use_case.submit_answer(attempt_id, question_id, 0)

        with ThreadPoolExecutor(max_workers=2) as executor:
            list(executor.map(answer, question_ids))

        with session_factory() as session:
            row = session.get(models.QuizAttempt, attempt_id)
            assert row is not None
            assert row.answers == {str(question_id): 0 for question_id in question_ids}

    def test_repeated_submit_scores_once(
        self, session_factory: sessionmaker[Session], attempt: tuple[int, list[int]]
    ) -> None:
        """Test a submit racing its own retry locks the attempt exactly once."""
        attempt_id, question_ids = attempt
        with session_factory() as session:
            use_case = _container(session).quiz_attempt_use_case()
            for question_id in question_ids:
                use_case.submit_answer(attempt_id, question_id, 0)

        locks = LearnerLockRegistry()
        barrier = threading.Barrier(2)

        def submit(_: int) -> tuple[bool, int]:
            with session_factory() as session:
                session.get(models.QuizAttempt, attempt_id)
                use_case = _container(session, locks).quiz_attempt_use_case()
                barrier.wait()
                result = use_case.submit_attempt(attempt_id).result
                return result.duplicate, result.xp_awarded

        with ThreadPoolExecutor(max_workers=2) as executor:
            outcomes = list(executor.map(submit, [1, 2]))

        assert sorted(outcomes) == [(False, 60), (True, 60)]

        with session_factory() as session:
            row = session.get(models.QuizAttempt, attempt_id)
            assert row is not None
            assert row.locked is True
            assert row.xp_awarded == 60
            assert _container(session).learner_progress_use_case().get_total_xp(1) == 60
