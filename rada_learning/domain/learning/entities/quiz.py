"""
Quiz content entities and the reward tier table.
"""

from dataclasses import dataclass, field

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ConfigurationError, ValidationError
from rada_learning.domain.common.value_object import ValueObject
from rada_learning.domain.common.value_objects import QuestionId, QuizId
from rada_learning.domain.learning.services.quiz_scoring_service import QuizScoringService

MAX_SCORE_PERCENT = 100


@dataclass(frozen=True)
class RewardTier(ValueObject):
    """Scores at or above min_score earn xp."""

    min_score: int
    xp: int

    def __post_init__(self) -> None:
        if not 0 <= self.min_score <= MAX_SCORE_PERCENT:
            raise ConfigurationError("Tier min_score must be within 0..100", field="min_score")
        if self.xp < 0:
            raise ConfigurationError("Tier xp cannot be negative", field="xp")


@dataclass(frozen=True)
class RewardTierTable(ValueObject):
    """
    Per-quiz reward tiers, kept sorted by min_score descending.

    Authors may submit tiers in any order; duplicates are rejected because
    two tiers with the same threshold make the lookup ambiguous.
    """

    tiers: tuple[RewardTier, ...] = ()

    def __post_init__(self) -> None:
        thresholds = [tier.min_score for tier in self.tiers]
        if len(set(thresholds)) != len(thresholds):
            raise ConfigurationError("Reward tiers must have distinct min_score", field="tiers")
        ordered = tuple(sorted(self.tiers, key=lambda tier: tier.min_score, reverse=True))
        object.__setattr__(self, "tiers", ordered)

    def xp_for(self, score_percent: int) -> int:
        """Return the XP of the first qualifying tier, or 0."""
        return QuizScoringService().tier_xp(
            [(tier.min_score, tier.xp) for tier in self.tiers], score_percent
        )

    def to_primitive(self) -> list[dict[str, int]]:
        return [{"min_score": tier.min_score, "xp": tier.xp} for tier in self.tiers]

    @classmethod
    def from_pairs(cls, pairs: list[tuple[int, int]]) -> "RewardTierTable":
        return cls(tuple(RewardTier(min_score=score, xp=xp) for score, xp in pairs))


@dataclass
class QuizQuestion(Entity[QuestionId]):
    """
    A multiple-choice question.

    Business Rules:
    - At least two options
    - correct_index points at one of the options
    """

    id: QuestionId
    prompt: str
    option_count: int
    correct_index: int
    position: int = 0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.option_count < 2:
            raise ConfigurationError("A question needs at least two options", field="options")
        if not 0 <= self.correct_index < self.option_count:
            raise ConfigurationError(
                "correct_index must reference one of the options", field="correct_index"
            )

    def validate_answer(self, answer_index: int) -> None:
        if not 0 <= answer_index < self.option_count:
            raise ValidationError(
                f"Answer index must be within 0..{self.option_count - 1}",
                field="answer_index",
                value=answer_index,
            )


@dataclass
class Quiz(Entity[QuizId]):
    """
    A timed quiz with a per-quiz reward tier table.

    Business Rules:
    - At least one question
    - time_limit_seconds is positive
    - passing_score_percent is within 0..100
    - Every reward change bumps version
    """

    id: QuizId
    title: str
    time_limit_seconds: int
    passing_score_percent: int
    questions: list[QuizQuestion] = field(default_factory=list)
    reward_tiers: RewardTierTable = field(default_factory=RewardTierTable)
    version: int = 1

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.title or not self.title.strip():
            raise ConfigurationError("Quiz title cannot be empty", field="title")
        if not self.questions:
            raise ConfigurationError("A quiz needs at least one question", field="questions")
        if self.time_limit_seconds <= 0:
            raise ConfigurationError(
                "time_limit_seconds must be positive", field="time_limit_seconds"
            )
        if not 0 <= self.passing_score_percent <= MAX_SCORE_PERCENT:
            raise ConfigurationError(
                "passing_score_percent must be within 0..100", field="passing_score_percent"
            )
        self.questions = sorted(self.questions, key=lambda question: question.position)

    @property
    def answer_key(self) -> dict[int, int]:
        return {question.id.value: question.correct_index for question in self.questions}

    def question(self, question_id: QuestionId) -> QuizQuestion | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def replace_reward_tiers(self, tiers: RewardTierTable) -> None:
        """Swap the tier table and bump the version."""
        self.reward_tiers = tiers
        self.version += 1

    @classmethod
    def create(
        cls,
        title: str,
        time_limit_seconds: int,
        passing_score_percent: int,
        questions: list[tuple[str, int, int]],
        reward_tiers: list[tuple[int, int]],
    ) -> "Quiz":
        """
        Create a new quiz (ids are 0 until persisted).

        Args:
            questions: (prompt, option_count, correct_index) in display order
            reward_tiers: (min_score, xp) pairs in any order
        """
        return cls(
            id=QuizId.generate(),
            title=title.strip(),
            time_limit_seconds=time_limit_seconds,
            passing_score_percent=passing_score_percent,
            questions=[
                QuizQuestion(
                    id=QuestionId.generate(),
                    prompt=prompt,
                    option_count=option_count,
                    correct_index=correct_index,
                    position=position,
                )
                for position, (prompt, option_count, correct_index) in enumerate(questions)
            ],
            reward_tiers=RewardTierTable.from_pairs(reward_tiers),
        )
