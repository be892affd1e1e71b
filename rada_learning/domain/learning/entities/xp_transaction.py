"""
XP ledger entry.

The ledger is append-only: entries are never updated or reversed, and the
(learner, source_type, source_id) triple is the idempotency key.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.common.value_object import ValueObject
from rada_learning.domain.common.value_objects import LearnerId, XPTransactionId


class XPSource(StrEnum):
    LESSON = "lesson"
    MODULE = "module"
    QUIZ = "quiz"
    BADGE = "badge"
    CHALLENGE = "challenge"


@dataclass(frozen=True)
class AwardKey(ValueObject):
    """Dedup key: at most one award per learner per source."""

    learner_id: LearnerId
    source_type: XPSource
    source_id: int

    def __post_init__(self) -> None:
        if self.source_id <= 0:
            raise ValidationError("source_id must be positive", field="source_id")


@dataclass
class XPTransaction(Entity[XPTransactionId]):
    """
    A single XP award.

    Business Rules:
    - amount is strictly positive
    - immutable once written
    """

    id: XPTransactionId
    learner_id: LearnerId
    source_type: XPSource
    source_id: int
    amount: int
    description: str = ""
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.amount <= 0:
            raise ValidationError("XP amount must be positive", field="amount", value=self.amount)

    @property
    def key(self) -> AwardKey:
        return AwardKey(self.learner_id, self.source_type, self.source_id)

    @classmethod
    def create(
        cls,
        key: AwardKey,
        amount: int,
        created_at: datetime,
        description: str = "",
    ) -> "XPTransaction":
        """Create a new ledger entry (ID will be 0 until persisted)."""
        return cls(
            id=XPTransactionId.generate(),
            learner_id=key.learner_id,
            source_type=key.source_type,
            source_id=key.source_id,
            amount=amount,
            description=description,
            created_at=created_at,
        )
