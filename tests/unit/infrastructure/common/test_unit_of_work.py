import sqlite3
import threading
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from rada_learning.config import Settings
from rada_learning.domain.common import DomainEvent
from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.common.value_objects import LearnerId, LessonId, ModuleId
from rada_learning.domain.learning.entities.module import LearningModule, Lesson
from rada_learning.domain.learning.entities.module_progress import ModuleProgress
from rada_learning.domain.learning.events import ModuleStarted
from rada_learning.exceptions import ServiceUnavailableError
from rada_learning.infrastructure.common.learner_locks import LearnerLockRegistry
from rada_learning.infrastructure.common.unit_of_work import SQLAlchemyUnitOfWork

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


def _settings(**overrides: float) -> Settings:
    values: dict[str, float] = {
        "STORAGE_RETRY_ATTEMPTS": 3,
        "STORAGE_RETRY_BACKOFF_SECONDS": 0.05,
        "LEARNER_LOCK_TIMEOUT_SECONDS": 1.0,
    }
    values.update(overrides)
    return Settings(DATABASE_URL="sqlite://", **values)


def _locked() -> OperationalError:
    return OperationalError("UPDATE challenges", {}, sqlite3.OperationalError("database is locked"))


class _Work:
    """Callable that fails with the given errors before succeeding."""

    def __init__(self, *errors: Exception) -> None:
        self.errors = list(errors)
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "done"


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=Session)


@pytest.fixture
def sleeps() -> list[float]:
    return []


def _uow(session: MagicMock, sleeps: list[float], **overrides: float) -> SQLAlchemyUnitOfWork:
    return SQLAlchemyUnitOfWork(
        session, LearnerLockRegistry(), _settings(**overrides), sleep=sleeps.append
    )


def test_commits_successful_work(session: MagicMock, sleeps: list[float]) -> None:
    """Test work that succeeds is committed once."""
    result = _uow(session, sleeps).run(_Work(), learner_id=LearnerId(1))

    assert result == "done"
    session.commit.assert_called_once()
    session.rollback.assert_not_called()
    assert sleeps == []


def test_retries_transient_errors_with_backoff(session: MagicMock, sleeps: list[float]) -> None:
    """Test a busy database and a lost unique race are retried with doubling delays."""
    lost_race = IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed"))
    work = _Work(_locked(), lost_race)

    result = _uow(session, sleeps).run(work)

    assert result == "done"
    assert work.calls == 3
    assert session.rollback.call_count == 2
    assert sleeps == [0.05, 0.1]
    assert session.expire_all.call_count == 3


def test_expires_session_state_before_work(session: MagicMock, sleeps: list[float]) -> None:
    """Test objects loaded before the learner lock are reloaded inside it."""
    seen: list[bool] = []

    def work() -> str:
        seen.append(session.expire_all.called)
        return "done"

    _uow(session, sleeps).run(work, learner_id=LearnerId(1))

    assert seen == [True]


def test_gives_up_after_max_attempts(session: MagicMock, sleeps: list[float]) -> None:
    """Test persistent storage failures surface as ServiceUnavailable."""
    work = _Work(_locked(), _locked(), _locked(), _locked())

    with pytest.raises(ServiceUnavailableError) as exc_info:
        _uow(session, sleeps).run(work)

    assert work.calls == 3
    assert exc_info.value.status_code == 503
    assert len(sleeps) == 2
    session.commit.assert_not_called()


def test_domain_errors_roll_back_without_retry(session: MagicMock, sleeps: list[float]) -> None:
    """Test business errors are not retried."""
    work = _Work(ValidationError("bad input"))

    with pytest.raises(ValidationError):
        _uow(session, sleeps).run(work)

    assert work.calls == 1
    session.rollback.assert_called_once()
    session.commit.assert_not_called()


def _started_progress() -> ModuleProgress:
    module = LearningModule(
        id=ModuleId(1),
        title="Python Basics",
        lessons=[Lesson(id=LessonId(1), module_id=ModuleId(1), title="Intro", order_index=1)],
    )
    return ModuleProgress.start(module, LearnerId(1), NOW)


def test_events_dispatched_after_commit(session: MagicMock, sleeps: list[float]) -> None:
    """Test tracked aggregates' events reach handlers once the work commits."""
    uow = _uow(session, sleeps)
    received: list[DomainEvent] = []
    uow.register_event_handler(received.append)
    progress = _started_progress()

    def work() -> None:
        uow.track(progress)

    uow.run(work)

    assert [type(e) for e in received] == [ModuleStarted]
    assert progress.pending_events == []


def test_events_discarded_on_rollback(session: MagicMock, sleeps: list[float]) -> None:
    """Test events of failed work are never dispatched."""
    uow = _uow(session, sleeps)
    received: list[DomainEvent] = []
    uow.register_event_handler(received.append)
    progress = _started_progress()

    def work() -> None:
        uow.track(progress)
        raise ValidationError("bad input")

    with pytest.raises(ValidationError):
        uow.run(work)

    assert received == []
    assert progress.pending_events == []


def test_busy_learner_times_out() -> None:
    """Test waiting on another thread's learner lock is bounded."""
    registry = LearnerLockRegistry()
    acquired = threading.Event()
    release = threading.Event()

    def hold() -> None:
        with registry.hold(7, timeout=1.0):
            acquired.set()
            release.wait(timeout=5)

    holder = threading.Thread(target=hold)
    holder.start()
    try:
        acquired.wait(timeout=5)
        with pytest.raises(ServiceUnavailableError), registry.hold(7, timeout=0.01):
            pass
        with registry.hold(8, timeout=0.01):
            pass
    finally:
        release.set()
        holder.join()


def test_learner_lock_is_reentrant() -> None:
    """Test the same thread can nest holds on one learner."""
    registry = LearnerLockRegistry()

    with registry.hold(7, timeout=0.01), registry.hold(7, timeout=0.01):
        assert len(registry) == 1


def test_idle_learner_locks_are_dropped() -> None:
    """Test the registry forgets a learner once nobody holds or waits on its lock."""
    registry = LearnerLockRegistry()

    for learner_id in range(100):
        with registry.hold(learner_id, timeout=0.01):
            assert len(registry) == 1

    assert len(registry) == 0


def test_lock_dropped_after_timeout() -> None:
    """Test a waiter that gives up does not leave its learner behind."""
    registry = LearnerLockRegistry()
    acquired = threading.Event()
    release = threading.Event()

    def hold() -> None:
        with registry.hold(7, timeout=1.0):
            acquired.set()
            release.wait(timeout=5)

    holder = threading.Thread(target=hold)
    holder.start()
    try:
        acquired.wait(timeout=5)
        with pytest.raises(ServiceUnavailableError), registry.hold(7, timeout=0.01):
            pass
        assert len(registry) == 1
    finally:
        release.set()
        holder.join()

    assert len(registry) == 0
