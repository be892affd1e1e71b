"""
XP ledger application service.

Awards are idempotent on (learner, source_type, source_id): the first award
for a key is recorded, every later one returns that same transaction.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.learning.protocols.xp_ledger_repository import (
    XPLedgerRepositoryProtocol,
)
from rada_learning.application.learning.use_cases.dtos.learner_dtos import DailyXP
from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.xp_transaction import (
    AwardKey,
    XPSource,
    XPTransaction,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AwardOutcome:
    """The ledger entry for a key and whether it already existed."""

    transaction: XPTransaction
    duplicate: bool

    @property
    def credited(self) -> int:
        """XP newly added to the balance by this call."""
        return 0 if self.duplicate else self.transaction.amount


class XPLedgerService:
    """Append-only XP ledger. There is no subtraction or reversal."""

    def __init__(self, xp_ledger_repository: XPLedgerRepositoryProtocol, clock: Clock) -> None:
        self.xp_ledger_repository = xp_ledger_repository
        self.clock = clock

    def award(
        self,
        learner_id: LearnerId,
        source_type: XPSource,
        source_id: int,
        amount: int,
        description: str = "",
    ) -> AwardOutcome:
        """
        Record an XP award once per dedup key.

        Args:
            learner_id: Receiving learner
            source_type: What earned the XP
            source_id: Id of the lesson, module, quiz, badge or challenge
            amount: Strictly positive XP
            description: Human readable reason

        Returns:
            AwardOutcome with the new or the previously recorded transaction

        Raises:
            ValidationError: If amount is not positive
        """
        if amount <= 0:
            raise ValidationError("XP amount must be positive", field="amount", value=amount)

        key = AwardKey(learner_id=learner_id, source_type=source_type, source_id=source_id)
        existing = self.xp_ledger_repository.find_by_key(key)
        if existing is not None:
            logger.info(
                "xp_award_duplicate",
                learner_id=learner_id.value,
                source_type=source_type.value,
                source_id=source_id,
            )
            return AwardOutcome(transaction=existing, duplicate=True)

        transaction = self.xp_ledger_repository.add(
            XPTransaction.create(key, amount, self.clock(), description)
        )
        logger.info(
            "xp_awarded",
            learner_id=learner_id.value,
            source_type=source_type.value,
            source_id=source_id,
            amount=amount,
        )
        return AwardOutcome(transaction=transaction, duplicate=False)

    def balance(self, learner_id: LearnerId) -> int:
        return self.xp_ledger_repository.total_for(learner_id)

    def history(self, learner_id: LearnerId, limit: int = 100) -> list[XPTransaction]:
        return self.xp_ledger_repository.find_by_learner(learner_id, limit)

    def daily_activity(self, learner_id: LearnerId, days: int) -> list[DailyXP]:
        """
        XP earned per UTC day over the last `days` days, oldest first.

        Days without activity are included with 0 XP.
        """
        if days <= 0:
            raise ValidationError("days must be positive", field="days", value=days)
        today = self.clock().astimezone(UTC).date()
        first_day = today - timedelta(days=days - 1)
        since = datetime.combine(first_day, time.min, tzinfo=UTC)
        totals = self.xp_ledger_repository.daily_totals(learner_id, since)
        window = [first_day + timedelta(days=offset) for offset in range(days)]
        return [DailyXP(day=day, xp=totals.get(day, 0)) for day in window]
