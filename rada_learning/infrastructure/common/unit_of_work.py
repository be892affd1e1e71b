"""SQLAlchemy implementation of the Unit of Work."""

import time
from collections.abc import Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.config import Settings
from rada_learning.domain.common import AggregateRoot, DomainEvent
from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.exceptions import ServiceUnavailableError
from rada_learning.infrastructure.common.learner_locks import LearnerLockRegistry

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def log_domain_event(event: DomainEvent) -> None:
    """Default handler: write every committed domain event to the structured log."""
    logger.info("domain_event", **event.to_dict())


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Transaction boundary over a request-scoped Session.

    Repositories only flush; this class owns commit and rollback. Transient
    storage errors (a busy database, or a unique key lost to a concurrent
    writer) roll back and re-run the work with exponential backoff.
    """

    def __init__(
        self,
        db: Session,
        learner_locks: LearnerLockRegistry,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.db = db
        self.learner_locks = learner_locks
        self.settings = settings
        self._sleep = sleep
        self._tracked: list[AggregateRoot] = []  # type: ignore[type-arg]
        self._handlers: list[Callable[[DomainEvent], None]] = [log_domain_event]

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
        # Events of rolled back work never happened
        for aggregate in self._tracked:
            aggregate.collect_events()
        self._tracked.clear()

    def track(self, aggregate: AggregateRoot) -> None:  # type: ignore[type-arg]
        if not any(tracked is aggregate for tracked in self._tracked):
            self._tracked.append(aggregate)

    def collect_events(self) -> list[DomainEvent]:
        events: list[DomainEvent] = []
        for aggregate in self._tracked:
            events.extend(aggregate.collect_events())
        self._tracked.clear()
        return events

    def register_event_handler(self, handler: Callable[[DomainEvent], None]) -> None:
        self._handlers.append(handler)

    def run(self, work: Callable[[], T], *, learner_id: LearnerId | None = None) -> T:
        if learner_id is None:
            return self._run_with_retries(work)
        with self.learner_locks.hold(
            learner_id.value, timeout=self.settings.LEARNER_LOCK_TIMEOUT_SECONDS
        ):
            return self._run_with_retries(work)

    def _run_with_retries(self, work: Callable[[], T]) -> T:
        attempts = self.settings.STORAGE_RETRY_ATTEMPTS
        attempt = 1
        while True:
            # Objects loaded before the lock was taken may be stale
            self.db.expire_all()
            try:
                result = work()
                self.commit()
            except (OperationalError, IntegrityError) as e:
                self.rollback()
                if attempt >= attempts:
                    logger.error(
                        "storage_retries_exhausted",
                        attempts=attempts,
                        error=str(e.orig),
                    )
                    raise ServiceUnavailableError(
                        "Storage is temporarily unavailable, retry later", attempts=attempts
                    ) from e
                delay = self.settings.STORAGE_RETRY_BACKOFF_SECONDS * 2 ** (attempt - 1)
                logger.warning(
                    "storage_retry",
                    attempt=attempt,
                    delay_seconds=delay,
                    error_type=type(e).__name__,
                    error=str(e.orig),
                )
                self._sleep(delay)
                attempt += 1
                continue
            except Exception:
                self.rollback()
                raise

            self._dispatch(self.collect_events())
            return result

    def _dispatch(self, events: list[DomainEvent]) -> None:
        for event in events:
            for handler in self._handlers:
                handler(event)
