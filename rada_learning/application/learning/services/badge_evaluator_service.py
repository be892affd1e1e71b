"""
Badge rule evaluator.

Badges unlock when every one of their conditions holds against the
learner's current stats. Re-evaluation runs inside the event that changed
the stats, so a badge is visible as soon as the event's response is.
"""

from datetime import datetime

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.learning.protocols.badge_repository import (
    BadgeAwardRepositoryProtocol,
    BadgeRepositoryProtocol,
)
from rada_learning.application.learning.protocols.learner_repository import (
    LearnerStatsRepositoryProtocol,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.dtos.learner_dtos import BadgeProgress
from rada_learning.domain.common.value_objects import BadgeId, LearnerId
from rada_learning.domain.learning.entities.badge import Badge, BadgeAward
from rada_learning.domain.learning.entities.xp_transaction import XPSource

logger = structlog.get_logger(__name__)


class BadgeRuleEvaluatorService:
    """Grants badges whose conjunctive conditions are satisfied."""

    def __init__(
        self,
        badge_repository: BadgeRepositoryProtocol,
        badge_award_repository: BadgeAwardRepositoryProtocol,
        stats_repository: LearnerStatsRepositoryProtocol,
        xp_ledger_service: XPLedgerService,
        clock: Clock,
    ) -> None:
        self.badge_repository = badge_repository
        self.badge_award_repository = badge_award_repository
        self.stats_repository = stats_repository
        self.xp_ledger_service = xp_ledger_service
        self.clock = clock

    def reevaluate(self, learner_id: LearnerId) -> list[Badge]:
        """
        Award every badge the learner now qualifies for.

        Repeats until a pass unlocks nothing, because one badge's XP bonus
        can satisfy another badge's total_xp condition.

        Returns:
            Badges newly awarded by this call, in award order
        """
        held = {award.badge_id for award in self.badge_award_repository.find_by_learner(learner_id)}
        candidates = [badge for badge in self.badge_repository.find_all() if badge.id not in held]
        awarded: list[Badge] = []

        while candidates:
            stats = self.stats_repository.snapshot(learner_id)
            unlocked = [badge for badge in candidates if badge.is_unlocked_by(stats)]
            if not unlocked:
                break
            for badge in unlocked:
                if self.grant(learner_id, badge):
                    awarded.append(badge)
            candidates = [badge for badge in candidates if badge not in unlocked]

        return awarded

    def grant(self, learner_id: LearnerId, badge: Badge) -> bool:
        """
        Award a badge and its XP bonus unless the learner already holds it.

        Shared by rule unlocks and challenge rewards so both obey the
        one-award-per-pair rule.

        Returns:
            True when the badge was newly awarded
        """
        if self.badge_award_repository.exists(learner_id, badge.id):
            return False

        now = self.clock()
        self.badge_award_repository.add(BadgeAward.create(learner_id, badge.id, now))
        if badge.xp_reward > 0:
            self.xp_ledger_service.award(
                learner_id, XPSource.BADGE, badge.id.value, badge.xp_reward, f"Badge: {badge.name}"
            )
        logger.info(
            "badge_awarded",
            learner_id=learner_id.value,
            badge_id=badge.id.value,
            badge_name=badge.name,
            xp_bonus=badge.xp_reward,
        )
        return True

    def progress(self, learner_id: LearnerId) -> list[BadgeProgress]:
        """Progress towards every badge; earned badges report 100."""
        awarded_at: dict[BadgeId, datetime] = {
            award.badge_id: award.awarded_at
            for award in self.badge_award_repository.find_by_learner(learner_id)
        }
        stats = self.stats_repository.snapshot(learner_id)
        result = []
        for badge in self.badge_repository.find_all():
            earned = badge.id in awarded_at
            result.append(
                BadgeProgress(
                    badge=badge,
                    earned=earned,
                    progress_percent=100 if earned else badge.progress_percent(stats),
                    awarded_at=awarded_at.get(badge.id),
                )
            )
        return result
