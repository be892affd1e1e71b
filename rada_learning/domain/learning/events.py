"""Domain events emitted by the learning aggregates."""

from dataclasses import dataclass

from rada_learning.domain.common.domain_event import DomainEvent
from rada_learning.domain.common.value_objects import (
    LearnerId,
    LessonId,
    ModuleId,
    QuizAttemptId,
    QuizId,
)


@dataclass(frozen=True, kw_only=True)
class ModuleStarted(DomainEvent):
    learner_id: LearnerId
    module_id: ModuleId


@dataclass(frozen=True, kw_only=True)
class LessonCompleted(DomainEvent):
    learner_id: LearnerId
    module_id: ModuleId
    lesson_id: LessonId


@dataclass(frozen=True, kw_only=True)
class LessonUnlocked(DomainEvent):
    learner_id: LearnerId
    module_id: ModuleId
    lesson_id: LessonId


@dataclass(frozen=True, kw_only=True)
class ModuleCompleted(DomainEvent):
    learner_id: LearnerId
    module_id: ModuleId


@dataclass(frozen=True, kw_only=True)
class QuizAttemptLocked(DomainEvent):
    learner_id: LearnerId
    quiz_id: QuizId
    attempt_id: QuizAttemptId
    score_percent: int
    passed: bool
    expired: bool
