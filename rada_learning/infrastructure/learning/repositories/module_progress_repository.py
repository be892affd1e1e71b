"""Repository for ModuleProgress aggregates."""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import LearnerId, ModuleId
from rada_learning.domain.learning.entities.module_progress import ModuleProgress
from rada_learning.infrastructure.learning.mappers.module_progress_mapper import (
    ModuleProgressMapper,
)
from rada_learning.models import LessonProgress as LessonProgressORM
from rada_learning.models import ModuleCompletion as ModuleCompletionORM


class ModuleProgressRepository:
    """
    Stores a learner's module progress as one lesson_progress row per lesson
    plus a module_completions row once the module is done.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ModuleProgressMapper()

    def find(self, learner_id: LearnerId, module_id: ModuleId) -> ModuleProgress | None:
        """Returns None when the learner has no state for the module."""
        rows = self._lesson_rows(learner_id.value, module_id.value)
        if not rows:
            return None
        completion = self._completion(learner_id.value, module_id.value)
        return self.mapper.to_domain(learner_id.value, module_id.value, rows, completion)

    def find_by_learner(self, learner_id: LearnerId) -> list[ModuleProgress]:
        stmt = select(LessonProgressORM).where(LessonProgressORM.learner_id == learner_id.value)
        rows_by_module: dict[int, list[LessonProgressORM]] = defaultdict(list)
        for row in self.db.execute(stmt).scalars().all():
            rows_by_module[row.module_id].append(row)

        completions = {
            completion.module_id: completion
            for completion in self.db.execute(
                select(ModuleCompletionORM).where(
                    ModuleCompletionORM.learner_id == learner_id.value
                )
            )
            .scalars()
            .all()
        }
        return [
            self.mapper.to_domain(learner_id.value, module_id, rows, completions.get(module_id))
            for module_id, rows in sorted(rows_by_module.items())
        ]

    def save(self, progress: ModuleProgress) -> ModuleProgress:
        """Upsert every lesson row and record the module completion once."""
        learner_id = progress.learner_id.value
        module_id = progress.module_id.value
        existing = {row.lesson_id: row for row in self._lesson_rows(learner_id, module_id)}

        for lesson in progress.lessons.values():
            row = existing.get(lesson.lesson_id.value)
            if row is None:
                self.db.add(self.mapper.lesson_to_orm(progress, lesson))
            else:
                self.mapper.lesson_to_orm(progress, lesson, row)

        if progress.completed_at is not None and self._completion(learner_id, module_id) is None:
            self.db.add(
                ModuleCompletionORM(
                    learner_id=learner_id,
                    module_id=module_id,
                    completed_at=progress.completed_at,
                )
            )

        self.db.flush()
        result = self.find(progress.learner_id, progress.module_id)
        assert result is not None
        return result

    def _lesson_rows(self, learner_id: int, module_id: int) -> list[LessonProgressORM]:
        stmt = select(LessonProgressORM).where(
            LessonProgressORM.learner_id == learner_id,
            LessonProgressORM.module_id == module_id,
        )
        return list(self.db.execute(stmt).scalars().all())

    def _completion(self, learner_id: int, module_id: int) -> ModuleCompletionORM | None:
        stmt = select(ModuleCompletionORM).where(
            ModuleCompletionORM.learner_id == learner_id,
            ModuleCompletionORM.module_id == module_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()
