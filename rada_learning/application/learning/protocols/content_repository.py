"""Protocols for authored learning content."""

from typing import Protocol

from rada_learning.domain.common.value_objects import LessonId, ModuleId, QuizId
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.entities.quiz import Quiz


class ModuleRepositoryProtocol(Protocol):
    """Protocol for LearningModule repository operations."""

    def find_by_id(self, module_id: ModuleId) -> LearningModule | None:
        """Find a module with its lessons in order."""
        ...

    def find_by_lesson(self, lesson_id: LessonId) -> LearningModule | None:
        """Find the module that contains the lesson."""
        ...

    def find_all(self) -> list[LearningModule]:
        """All modules ordered by id."""
        ...

    def save(self, module: LearningModule) -> LearningModule:
        """Create a module together with its lessons."""
        ...


class QuizRepositoryProtocol(Protocol):
    """Protocol for Quiz repository operations."""

    def find_by_id(self, quiz_id: QuizId) -> Quiz | None:
        """Find a quiz with its questions and reward tiers."""
        ...

    def save(self, quiz: Quiz) -> Quiz:
        """Create a quiz, or update the reward tiers and version of an existing one."""
        ...
