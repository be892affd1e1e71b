from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class LearnerId(EntityId):
    """Strongly-typed learner identifier (issued by the identity service)."""

    value: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.value == 0:
            raise ValueError("LearnerId must be positive")


@dataclass(frozen=True)
class ModuleId(EntityId):
    """Strongly-typed module identifier."""


@dataclass(frozen=True)
class LessonId(EntityId):
    """Strongly-typed lesson identifier."""


@dataclass(frozen=True)
class QuizId(EntityId):
    """Strongly-typed quiz identifier."""


@dataclass(frozen=True)
class QuestionId(EntityId):
    """Strongly-typed quiz question identifier."""


@dataclass(frozen=True)
class QuizAttemptId(EntityId):
    """Strongly-typed quiz attempt identifier."""


@dataclass(frozen=True)
class XPTransactionId(EntityId):
    """Strongly-typed XP ledger entry identifier."""


@dataclass(frozen=True)
class BadgeId(EntityId):
    """Strongly-typed badge identifier."""


@dataclass(frozen=True)
class BadgeAwardId(EntityId):
    """Strongly-typed badge award identifier."""


@dataclass(frozen=True)
class ChallengeId(EntityId):
    """Strongly-typed challenge identifier."""


@dataclass(frozen=True)
class ParticipationId(EntityId):
    """Strongly-typed challenge participation identifier."""
