"""
Base class for Aggregate Roots.

An aggregate root guards the invariants of a cluster of objects that change
together. Outside code talks to the root only, and the root records domain
events that the Unit of Work dispatches once the transaction commits.

Example:
    @dataclass
    class ModuleProgress(AggregateRoot[ModuleId]):
        id: ModuleId
        learner_id: LearnerId

        def complete(self, lesson_id: LessonId, at: datetime) -> None:
            ...
            self._record_event(LessonCompleted(self.learner_id, lesson_id))
"""

from dataclasses import dataclass, field
from typing import Generic

from .domain_event import DomainEvent
from .entity import Entity, IdType


@dataclass
class AggregateRoot(Entity[IdType], Generic[IdType]):
    """
    Base class for Aggregate Roots in the domain model.

    Events accumulate on the instance until `collect_events` drains them.
    """

    _events: list[DomainEvent] = field(
        default_factory=list, repr=False, compare=False, kw_only=True
    )

    def _record_event(self, event: DomainEvent) -> None:
        """Record a domain event to be dispatched after commit."""
        self._events.append(event)

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear the recorded domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    @property
    def pending_events(self) -> list[DomainEvent]:
        """Return pending events without clearing them."""
        return self._events.copy()
