"""
ModuleProgress aggregate root: the progression state machine.

Each (learner, lesson) pair moves Locked -> Unlocked -> Completed. The first
lesson of a module starts Unlocked; every other lesson is unlocked only by
completing its predecessor, which is what keeps completion sequential.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from rada_learning.domain.common.aggregate_root import AggregateRoot
from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.domain.common.value_objects import LearnerId, LessonId, ModuleId
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.events import (
    LessonCompleted,
    LessonUnlocked,
    ModuleCompleted,
    ModuleStarted,
)
from rada_learning.domain.learning.exceptions import InvalidTransitionError


class LessonStatus(StrEnum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


class ModuleStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class LessonProgress(Entity[LessonId]):
    """A learner's state for one lesson. Identity is the lesson id."""

    id: LessonId
    status: LessonStatus
    unlocked_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def lesson_id(self) -> LessonId:
        return self.id

    def unlock(self, at: datetime) -> None:
        if self.status is not LessonStatus.LOCKED:
            raise InvalidTransitionError(
                "lesson", self.status.value, "unlock", lesson_id=self.id.value
            )
        self.status = LessonStatus.UNLOCKED
        self.unlocked_at = at

    def complete(self, at: datetime) -> None:
        if self.status is not LessonStatus.UNLOCKED:
            raise InvalidTransitionError(
                "lesson", self.status.value, "complete", lesson_id=self.id.value
            )
        self.status = LessonStatus.COMPLETED
        self.completed_at = at


@dataclass(frozen=True)
class LessonCompletion:
    """Outcome of completing a lesson, including the cascade it triggered."""

    lesson_id: LessonId
    completed_at: datetime
    unlocked_lesson_id: LessonId | None = None
    module_completed: bool = False
    duplicate: bool = False


@dataclass
class ModuleProgress(AggregateRoot[ModuleId]):
    """
    A learner's progression through a single module.

    Business Rules:
    - Holds exactly one LessonProgress per lesson of the module
    - Lesson N > 1 is never Completed while lesson N - 1 is not Completed
    - Completed is terminal; completing again is a duplicate, not an error
    - The module completes once, when its last incomplete lesson completes
    """

    id: ModuleId
    learner_id: LearnerId
    lessons: dict[LessonId, LessonProgress] = field(default_factory=dict)
    completed_at: datetime | None = None

    @property
    def module_id(self) -> ModuleId:
        return self.id

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def status(self) -> ModuleStatus:
        if self.is_completed:
            return ModuleStatus.COMPLETED
        if any(p.status is LessonStatus.COMPLETED for p in self.lessons.values()):
            return ModuleStatus.IN_PROGRESS
        return ModuleStatus.NOT_STARTED

    def lesson_status(self, lesson_id: LessonId) -> LessonStatus:
        progress = self.lessons.get(lesson_id)
        if progress is None:
            raise DomainError(f"Lesson {lesson_id} is not part of module {self.id}")
        return progress.status

    def reconcile(self, module: LearningModule, at: datetime) -> list[LessonProgress]:
        """
        Materialise rows for lessons this learner has no state for yet.

        A missing lesson is Unlocked when it is first in the module or its
        predecessor is Completed, otherwise Locked.

        Returns:
            The newly created LessonProgress rows
        """
        if module.id != self.id:
            raise DomainError(f"Module {module.id} does not match progress for {self.id}")

        created: list[LessonProgress] = []
        previous: LessonProgress | None = None
        for lesson in module.lessons:
            progress = self.lessons.get(lesson.id)
            if progress is None:
                unlocked = previous is None or previous.status is LessonStatus.COMPLETED
                progress = LessonProgress(
                    id=lesson.id,
                    status=LessonStatus.UNLOCKED if unlocked else LessonStatus.LOCKED,
                    unlocked_at=at if unlocked else None,
                )
                self.lessons[lesson.id] = progress
                created.append(progress)
            previous = progress
        return created

    def complete_lesson(
        self, module: LearningModule, lesson_id: LessonId, at: datetime
    ) -> LessonCompletion:
        """
        Complete a lesson and cascade the unlock / module completion.

        Args:
            module: Content definition of this module
            lesson_id: Lesson being completed
            at: Completion timestamp

        Returns:
            LessonCompletion describing what changed

        Raises:
            InvalidTransitionError: If the lesson is still Locked
        """
        self.reconcile(module, at)
        progress = self.lessons.get(lesson_id)
        if progress is None:
            raise DomainError(f"Lesson {lesson_id} is not part of module {self.id}")

        if progress.status is LessonStatus.COMPLETED:
            assert progress.completed_at is not None
            return LessonCompletion(
                lesson_id=lesson_id, completed_at=progress.completed_at, duplicate=True
            )

        progress.complete(at)
        self._record_event(
            LessonCompleted(learner_id=self.learner_id, module_id=self.id, lesson_id=lesson_id)
        )

        unlocked_id: LessonId | None = None
        successor = module.successor_of(lesson_id)
        if successor is not None:
            next_progress = self.lessons[successor.id]
            if next_progress.status is LessonStatus.LOCKED:
                next_progress.unlock(at)
                unlocked_id = successor.id
                self._record_event(
                    LessonUnlocked(
                        learner_id=self.learner_id, module_id=self.id, lesson_id=successor.id
                    )
                )

        module_completed = False
        if not self.is_completed and all(
            self.lessons[lesson.id].status is LessonStatus.COMPLETED for lesson in module.lessons
        ):
            self.completed_at = at
            module_completed = True
            self._record_event(ModuleCompleted(learner_id=self.learner_id, module_id=self.id))

        return LessonCompletion(
            lesson_id=lesson_id,
            completed_at=at,
            unlocked_lesson_id=unlocked_id,
            module_completed=module_completed,
        )

    @classmethod
    def start(
        cls, module: LearningModule, learner_id: LearnerId, at: datetime
    ) -> "ModuleProgress":
        """Create the initial state: first lesson Unlocked, the rest Locked."""
        progress = cls(id=module.id, learner_id=learner_id)
        progress.reconcile(module, at)
        progress._record_event(ModuleStarted(learner_id=learner_id, module_id=module.id))
        return progress

    @classmethod
    def create_with_state(
        cls,
        module_id: ModuleId,
        learner_id: LearnerId,
        lessons: list[LessonProgress],
        completed_at: datetime | None = None,
    ) -> "ModuleProgress":
        """Reconstitute progress from persistence."""
        return cls(
            id=module_id,
            learner_id=learner_id,
            lessons={progress.id: progress for progress in lessons},
            completed_at=completed_at,
        )
