"""Query use case for a learner's progress snapshot."""

from datetime import datetime

from rada_learning.application.common.clock import Clock
from rada_learning.application.learning.protocols.badge_repository import (
    BadgeAwardRepositoryProtocol,
    BadgeRepositoryProtocol,
)
from rada_learning.application.learning.protocols.content_repository import (
    ModuleRepositoryProtocol,
)
from rada_learning.application.learning.protocols.learner_repository import (
    LearnerRepositoryProtocol,
)
from rada_learning.application.learning.protocols.module_progress_repository import (
    ModuleProgressRepositoryProtocol,
)
from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.dtos import (
    BadgeProgress,
    DailyXP,
    EarnedBadge,
    LearnerProgress,
    LessonView,
    ModuleView,
)
from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import level_for
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.entities.module_progress import ModuleProgress
from rada_learning.domain.learning.entities.xp_transaction import XPTransaction


class LearnerProgressUseCase:
    """
    Read-only views of a learner's progress.

    Nothing here writes: a learner without any events gets an empty
    snapshot rather than a new row.
    """

    def __init__(
        self,
        module_repository: ModuleRepositoryProtocol,
        module_progress_repository: ModuleProgressRepositoryProtocol,
        learner_repository: LearnerRepositoryProtocol,
        badge_repository: BadgeRepositoryProtocol,
        badge_award_repository: BadgeAwardRepositoryProtocol,
        xp_ledger_service: XPLedgerService,
        badge_evaluator_service: BadgeRuleEvaluatorService,
        clock: Clock,
        xp_per_level: int = 100,
        activity_window_days: int = 7,
    ) -> None:
        self.module_repository = module_repository
        self.module_progress_repository = module_progress_repository
        self.learner_repository = learner_repository
        self.badge_repository = badge_repository
        self.badge_award_repository = badge_award_repository
        self.xp_ledger_service = xp_ledger_service
        self.badge_evaluator_service = badge_evaluator_service
        self.clock = clock
        self.xp_per_level = xp_per_level
        self.activity_window_days = activity_window_days

    def get_progress(self, learner_id: int) -> LearnerProgress:
        learner_vo = LearnerId(learner_id)
        now = self.clock()
        progress_by_module = {
            progress.module_id: progress
            for progress in self.module_progress_repository.find_by_learner(learner_vo)
        }
        modules = [
            self._module_view(module, progress_by_module.get(module.id), learner_vo, now)
            for module in self.module_repository.find_all()
        ]

        total_xp = self.xp_ledger_service.balance(learner_vo)
        learner = self.learner_repository.find_by_id(learner_vo)
        badge_names = {badge.id: badge.name for badge in self.badge_repository.find_all()}
        badges_earned = [
            EarnedBadge(
                badge_id=award.badge_id.value,
                name=badge_names.get(award.badge_id, ""),
                awarded_at=award.awarded_at,
            )
            for award in self.badge_award_repository.find_by_learner(learner_vo)
        ]

        return LearnerProgress(
            learner_id=learner_id,
            modules=modules,
            total_xp=total_xp,
            level=level_for(total_xp, self.xp_per_level),
            current_streak=learner.current_streak if learner else 0,
            longest_streak=learner.longest_streak if learner else 0,
            badges_earned=badges_earned,
        )

    def get_xp_history(self, learner_id: int, limit: int = 100) -> list[XPTransaction]:
        return self.xp_ledger_service.history(LearnerId(learner_id), limit)

    def get_total_xp(self, learner_id: int) -> int:
        return self.xp_ledger_service.balance(LearnerId(learner_id))

    def get_activity(self, learner_id: int, days: int | None = None) -> list[DailyXP]:
        """XP per UTC day over `days` days, defaulting to the configured window."""
        return self.xp_ledger_service.daily_activity(
            LearnerId(learner_id), days or self.activity_window_days
        )

    def get_badge_progress(self, learner_id: int) -> list[BadgeProgress]:
        return self.badge_evaluator_service.progress(LearnerId(learner_id))

    def _module_view(
        self,
        module: LearningModule,
        progress: ModuleProgress | None,
        learner_id: LearnerId,
        now: datetime,
    ) -> ModuleView:
        # Reconciled in memory only, never saved from a query
        if progress is None:
            progress = ModuleProgress(id=module.id, learner_id=learner_id)
        progress.reconcile(module, now)

        lessons = []
        for lesson in module.lessons:
            state = progress.lessons[lesson.id]
            lessons.append(
                LessonView(
                    lesson_id=lesson.id.value,
                    title=lesson.title,
                    order_index=lesson.order_index,
                    status=state.status.value,
                    completed_at=state.completed_at,
                )
            )

        return ModuleView(
            module_id=module.id.value,
            title=module.title,
            status=progress.status.value,
            lessons=lessons,
            completed_at=progress.completed_at,
        )

