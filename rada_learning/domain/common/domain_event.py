"""
Base class for Domain Events.

Domain events are immutable records of something that already happened to
an aggregate, such as a lesson being completed or a quiz attempt locking.

Example:
    @dataclass(frozen=True)
    class LessonCompleted(DomainEvent):
        learner_id: LearnerId
        lesson_id: LessonId
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for Domain Events.

    Subclasses are frozen dataclasses named in past tense. Every event gets
    its own id and an occurrence timestamp.
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Return the event type name for serialization."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, object]:
        """Convert event to a flat dictionary suitable for structured logs."""
        result: dict[str, object] = {}
        for key, value in self.__dict__.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, UUID):
                result[key] = str(value)
            elif isinstance(value, Enum):
                result[key] = value.value
            elif hasattr(value, "to_primitive"):
                result[key] = value.to_primitive()
            else:
                result[key] = value
        result["event_type"] = self.event_type
        return result
