"""Protocol for per-learner module progression state."""

from typing import Protocol

from rada_learning.domain.common.value_objects import LearnerId, ModuleId
from rada_learning.domain.learning.entities.module_progress import ModuleProgress


class ModuleProgressRepositoryProtocol(Protocol):
    """Protocol for ModuleProgress aggregate persistence."""

    def find(self, learner_id: LearnerId, module_id: ModuleId) -> ModuleProgress | None:
        """
        Load a learner's progress in a module.

        Returns:
            None when the learner has never interacted with the module
        """
        ...

    def find_by_learner(self, learner_id: LearnerId) -> list[ModuleProgress]:
        """All modules the learner has started."""
        ...

    def save(self, progress: ModuleProgress) -> ModuleProgress:
        """Upsert lesson rows and record the module completion if newly set."""
        ...
