"""
Unit of Work interface.

The Unit of Work pattern maintains a list of objects affected by a business
transaction and coordinates the writing out of changes and the resolution
of concurrency problems.

Every learner event runs through `run`: the state change, the ledger write
and the badge re-check either all commit or all roll back.

Example:
    class ProgressionUseCase:
        def complete_lesson(self, learner_id: int, lesson_id: int) -> LessonCompletion:
            return self.uow.run(
                lambda: self._complete_lesson(LearnerId(learner_id), LessonId(lesson_id)),
                learner_id=LearnerId(learner_id),
            )
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

from rada_learning.domain.common import AggregateRoot, DomainEvent
from rada_learning.domain.common.value_objects import LearnerId

T = TypeVar("T")


class UnitOfWork(ABC):
    """
    Unit of Work interface (Port).

    The Unit of Work:
    - Manages database transactions
    - Ensures atomicity of operations
    - Serializes work per learner
    - Collects and dispatches domain events

    Infrastructure layer provides concrete implementations
    (e.g., SQLAlchemyUnitOfWork).
    """

    @abstractmethod
    def commit(self) -> None:
        """
        Commit the current transaction.

        This persists all changes made within the unit of work.
        After commit, domain events should be dispatched.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """
        Rollback the current transaction.

        This discards all changes made within the unit of work.
        """
        raise NotImplementedError

    @abstractmethod
    def run(self, work: Callable[[], T], *, learner_id: LearnerId | None = None) -> T:
        """
        Execute `work` as one transaction and commit it.

        Args:
            work: Callable doing reads and writes through the repositories.
                It may be invoked more than once when storage reports a
                transient failure, so it must re-read everything it needs.
            learner_id: When given, work for the same learner is serialized.

        Returns:
            Whatever `work` returned on the attempt that committed

        Raises:
            ServiceUnavailableError: Lock or storage unavailable after retries
        """
        raise NotImplementedError

    def track(self, aggregate: AggregateRoot) -> None:  # type: ignore[type-arg]
        """
        Remember an aggregate whose events are dispatched after commit.

        Override in implementations that dispatch events.
        """
        _ = aggregate

    def collect_events(self) -> list[DomainEvent]:
        """
        Collect domain events from aggregates.

        Override in implementations to collect events from
        tracked aggregates before dispatching.
        """
        return []

    def register_event_handler(self, handler: Callable[[DomainEvent], None]) -> None:
        """
        Register a handler to be called for domain events.

        Events are dispatched after successful commit.
        Override in implementations that support event dispatching.
        """
        _ = handler
