"""
Badge definitions, their unlock conditions, and awards.

Unlock conditions are data: a tagged {stat_type, operator, threshold} record
interpreted by one generic evaluator instead of per-badge code.
"""

import operator
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ConfigurationError
from rada_learning.domain.common.value_object import ValueObject
from rada_learning.domain.common.value_objects import BadgeAwardId, BadgeId, LearnerId
from rada_learning.domain.learning.entities.learner import LearnerStats
from rada_learning.domain.learning.services.quiz_scoring_service import round_half_up_percent


class StatType(StrEnum):
    TOTAL_XP = "total_xp"
    LESSONS_COMPLETED = "lessons_completed"
    MODULES_COMPLETED = "modules_completed"
    QUIZZES_PASSED = "quizzes_passed"
    CHALLENGES_COMPLETED = "challenges_completed"
    COMMUNITY_POSTS = "community_posts"
    CURRENT_STREAK = "current_streak"


class ComparisonOperator(StrEnum):
    GTE = ">="
    GT = ">"
    EQ = "="
    LT = "<"
    LTE = "<="


_COMPARATORS: dict[ComparisonOperator, Callable[[int, int], bool]] = {
    ComparisonOperator.GTE: operator.ge,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.EQ: operator.eq,
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LTE: operator.le,
}


@dataclass(frozen=True)
class UnlockCondition(ValueObject):
    """`stat_type operator threshold`, e.g. lessons_completed >= 5."""

    stat_type: StatType
    operator: ComparisonOperator
    threshold: int

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ConfigurationError("Condition threshold cannot be negative", field="threshold")

    def is_met(self, stats: LearnerStats) -> bool:
        return _COMPARATORS[self.operator](stats.value_of(self.stat_type), self.threshold)

    def progress_percent(self, stats: LearnerStats) -> int:
        """
        How close the learner is to meeting this condition, 0..100.

        Only lower bounds have a meaningful partial progress; the other
        operators report all or nothing.
        """
        if self.is_met(stats):
            return 100
        if self.operator not in (ComparisonOperator.GTE, ComparisonOperator.GT):
            return 0
        target = self.threshold + 1 if self.operator is ComparisonOperator.GT else self.threshold
        current = max(0, stats.value_of(self.stat_type))
        return min(99, round_half_up_percent(min(current, target), target))

    def to_primitive(self) -> dict[str, object]:
        return {
            "stat_type": self.stat_type.value,
            "operator": self.operator.value,
            "threshold": self.threshold,
        }

    @classmethod
    def parse(cls, stat_type: str, operator: str, threshold: int) -> "UnlockCondition":
        """
        Build a condition from authored strings.

        Raises:
            ConfigurationError: On an unknown stat type or operator
        """
        try:
            stat = StatType(stat_type)
        except ValueError:
            known = ", ".join(s.value for s in StatType)
            raise ConfigurationError(
                f"Unknown stat_type '{stat_type}' (known: {known})", field="stat_type"
            ) from None
        try:
            op = ComparisonOperator(operator)
        except ValueError:
            known = ", ".join(o.value for o in ComparisonOperator)
            raise ConfigurationError(
                f"Unknown operator '{operator}' (known: {known})", field="operator"
            ) from None
        return cls(stat_type=stat, operator=op, threshold=threshold)


@dataclass
class Badge(Entity[BadgeId]):
    """
    An achievement unlocked when ALL of its conditions hold.

    Business Rules:
    - At least one condition
    - xp_reward (the unlock bonus) cannot be negative
    - Every definition change bumps version
    """

    id: BadgeId
    name: str
    conditions: list[UnlockCondition] = field(default_factory=list)
    description: str = ""
    xp_reward: int = 0
    version: int = 1

    def __post_init__(self) -> None:
        """Validate invariants."""
        _validate_definition(self.name, self.conditions, self.xp_reward)

    def is_unlocked_by(self, stats: LearnerStats) -> bool:
        return all(condition.is_met(stats) for condition in self.conditions)

    def progress_percent(self, stats: LearnerStats) -> int:
        return min(condition.progress_percent(stats) for condition in self.conditions)

    def redefine(
        self,
        name: str,
        conditions: list[UnlockCondition],
        description: str = "",
        xp_reward: int = 0,
    ) -> None:
        """Replace the definition and bump the version."""
        _validate_definition(name, conditions, xp_reward)
        self.name = name.strip()
        self.conditions = list(conditions)
        self.description = description
        self.xp_reward = xp_reward
        self.version += 1

    @classmethod
    def create(
        cls,
        name: str,
        conditions: list[UnlockCondition],
        description: str = "",
        xp_reward: int = 0,
    ) -> "Badge":
        """Create a new badge (ID will be 0 until persisted)."""
        return cls(
            id=BadgeId.generate(),
            name=name.strip(),
            conditions=list(conditions),
            description=description,
            xp_reward=xp_reward,
        )


def _validate_definition(name: str, conditions: list[UnlockCondition], xp_reward: int) -> None:
    if not name or not name.strip():
        raise ConfigurationError("Badge name cannot be empty", field="name")
    if not conditions:
        raise ConfigurationError("A badge needs at least one condition", field="conditions")
    if xp_reward < 0:
        raise ConfigurationError("Badge xp_reward cannot be negative", field="xp_reward")


@dataclass
class BadgeAward(Entity[BadgeAwardId]):
    """A badge earned by a learner. At most one per (learner, badge), ever."""

    id: BadgeAwardId
    learner_id: LearnerId
    badge_id: BadgeId
    awarded_at: datetime

    @classmethod
    def create(
        cls, learner_id: LearnerId, badge_id: BadgeId, awarded_at: datetime
    ) -> "BadgeAward":
        return cls(
            id=BadgeAwardId.generate(),
            learner_id=learner_id,
            badge_id=badge_id,
            awarded_at=awarded_at,
        )
