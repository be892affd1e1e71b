"""Use case for sequential lesson and module progression."""

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.application.learning.protocols.content_repository import (
    ModuleRepositoryProtocol,
)
from rada_learning.application.learning.protocols.module_progress_repository import (
    ModuleProgressRepositoryProtocol,
)
from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.learner_activity_service import (
    LearnerActivityService,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.dtos import (
    LessonCompletionResult,
    ModuleStartResult,
)
from rada_learning.domain.common.exceptions import EntityNotFoundError
from rada_learning.domain.common.value_objects import LearnerId, LessonId, ModuleId
from rada_learning.domain.learning.entities.module_progress import ModuleProgress
from rada_learning.domain.learning.entities.xp_transaction import XPSource

logger = structlog.get_logger(__name__)


class ProgressionUseCase:
    """Drives the Locked -> Unlocked -> Completed lesson state machine."""

    def __init__(
        self,
        uow: UnitOfWork,
        module_repository: ModuleRepositoryProtocol,
        module_progress_repository: ModuleProgressRepositoryProtocol,
        xp_ledger_service: XPLedgerService,
        learner_activity_service: LearnerActivityService,
        badge_evaluator_service: BadgeRuleEvaluatorService,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.module_repository = module_repository
        self.module_progress_repository = module_progress_repository
        self.xp_ledger_service = xp_ledger_service
        self.learner_activity_service = learner_activity_service
        self.badge_evaluator_service = badge_evaluator_service
        self.clock = clock

    def start_module(self, learner_id: int, module_id: int) -> ModuleStartResult:
        """
        Materialise the learner's lesson states for a module.

        Starting again is a no-op apart from picking up lessons appended to
        the module since the first start.

        Raises:
            EntityNotFoundError: If the module does not exist
        """
        learner = LearnerId(learner_id)
        return self.uow.run(
            lambda: self._start_module(learner, ModuleId(module_id)), learner_id=learner
        )

    def complete_lesson(self, learner_id: int, lesson_id: int) -> LessonCompletionResult:
        """
        Complete a lesson and apply its rewards.

        In one transaction: mark the lesson Completed, unlock its successor,
        complete the module when it was the last lesson, award lesson and
        module XP, update the streak and re-evaluate badges.

        Raises:
            EntityNotFoundError: If the lesson does not exist
            InvalidTransitionError: If the lesson is still Locked
        """
        learner = LearnerId(learner_id)
        return self.uow.run(
            lambda: self._complete_lesson(learner, LessonId(lesson_id)), learner_id=learner
        )

    def _start_module(self, learner_id: LearnerId, module_id: ModuleId) -> ModuleStartResult:
        now = self.clock()
        module = self.module_repository.find_by_id(module_id)
        if module is None:
            raise EntityNotFoundError("Module", module_id.value)

        self.learner_activity_service.ensure_learner(learner_id, now)
        progress = self.module_progress_repository.find(learner_id, module_id)
        duplicate = progress is not None
        if progress is None:
            progress = ModuleProgress.start(module, learner_id, now)
        else:
            progress.reconcile(module, now)

        self.uow.track(progress)
        progress = self.module_progress_repository.save(progress)
        logger.info(
            "module_started",
            learner_id=learner_id.value,
            module_id=module_id.value,
            duplicate=duplicate,
        )
        return ModuleStartResult(progress=progress, duplicate=duplicate)

    def _complete_lesson(
        self, learner_id: LearnerId, lesson_id: LessonId
    ) -> LessonCompletionResult:
        now = self.clock()
        module = self.module_repository.find_by_lesson(lesson_id)
        if module is None:
            raise EntityNotFoundError("Lesson", lesson_id.value)
        lesson = module.lesson(lesson_id)
        assert lesson is not None

        self.learner_activity_service.ensure_learner(learner_id, now)
        progress = self.module_progress_repository.find(learner_id, module.id)
        if progress is None:
            progress = ModuleProgress.start(module, learner_id, now)

        completion = progress.complete_lesson(module, lesson_id, now)
        if completion.duplicate:
            logger.info(
                "lesson_completion_duplicate",
                learner_id=learner_id.value,
                lesson_id=lesson_id.value,
            )
            return LessonCompletionResult(
                lesson_id=lesson_id.value,
                module_id=module.id.value,
                completed_at=completion.completed_at,
                duplicate=True,
                module_completed=progress.is_completed,
            )

        self.uow.track(progress)
        self.module_progress_repository.save(progress)

        xp_awarded = 0
        if lesson.xp_reward > 0:
            xp_awarded = self.xp_ledger_service.award(
                learner_id,
                XPSource.LESSON,
                lesson_id.value,
                lesson.xp_reward,
                f"Lesson: {lesson.title}",
            ).credited

        module_xp_awarded = 0
        if completion.module_completed and module.xp_reward > 0:
            module_xp_awarded = self.xp_ledger_service.award(
                learner_id,
                XPSource.MODULE,
                module.id.value,
                module.xp_reward,
                f"Module: {module.title}",
            ).credited

        self.learner_activity_service.record_activity(learner_id, now)
        badges = self.badge_evaluator_service.reevaluate(learner_id)

        logger.info(
            "lesson_completed",
            learner_id=learner_id.value,
            lesson_id=lesson_id.value,
            module_id=module.id.value,
            module_completed=completion.module_completed,
            xp_awarded=xp_awarded + module_xp_awarded,
        )
        return LessonCompletionResult(
            lesson_id=lesson_id.value,
            module_id=module.id.value,
            completed_at=completion.completed_at,
            duplicate=False,
            xp_awarded=xp_awarded,
            unlocked_lesson_id=(
                completion.unlocked_lesson_id.value if completion.unlocked_lesson_id else None
            ),
            module_completed=completion.module_completed,
            module_xp_awarded=module_xp_awarded,
            badges_awarded=badges,
        )
