"""Use case for authoring learning content and reward rules."""

from datetime import datetime

import structlog

from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.application.learning.protocols.badge_repository import BadgeRepositoryProtocol
from rada_learning.application.learning.protocols.challenge_repository import (
    ChallengeRepositoryProtocol,
)
from rada_learning.application.learning.protocols.content_repository import (
    ModuleRepositoryProtocol,
    QuizRepositoryProtocol,
)
from rada_learning.domain.common.exceptions import ConfigurationError, EntityNotFoundError
from rada_learning.domain.common.value_objects import BadgeId, ModuleId, QuizId
from rada_learning.domain.learning.entities.badge import Badge, UnlockCondition
from rada_learning.domain.learning.entities.challenge import Challenge
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.entities.quiz import Quiz, RewardTierTable

logger = structlog.get_logger(__name__)

ConditionSpec = tuple[str, str, int]


class ContentUseCase:
    """
    Creates and versions modules, quizzes, badges and challenges.

    Definitions are validated when they are saved; an invalid rule or tier
    table is rejected with ConfigurationError and never stored.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        module_repository: ModuleRepositoryProtocol,
        quiz_repository: QuizRepositoryProtocol,
        badge_repository: BadgeRepositoryProtocol,
        challenge_repository: ChallengeRepositoryProtocol,
    ) -> None:
        self.uow = uow
        self.module_repository = module_repository
        self.quiz_repository = quiz_repository
        self.badge_repository = badge_repository
        self.challenge_repository = challenge_repository

    def create_module(
        self, title: str, lessons: list[tuple[str, int]], xp_reward: int = 0
    ) -> LearningModule:
        """
        Create a module from (title, xp_reward) lesson pairs in learning order.

        Raises:
            ConfigurationError: On an empty module or negative rewards
        """
        module = LearningModule.create(title, lessons, xp_reward)
        saved = self.uow.run(lambda: self.module_repository.save(module))
        logger.info("module_created", module_id=saved.id.value, lesson_count=len(saved.lessons))
        return saved

    def get_module(self, module_id: int) -> LearningModule:
        module = self.module_repository.find_by_id(ModuleId(module_id))
        if module is None:
            raise EntityNotFoundError("Module", module_id)
        return module

    def create_quiz(
        self,
        title: str,
        time_limit_seconds: int,
        passing_score_percent: int,
        questions: list[tuple[str, int, int]],
        reward_tiers: list[tuple[int, int]],
    ) -> Quiz:
        """
        Create a quiz.

        Args:
            questions: (prompt, option_count, correct_index) in display order
            reward_tiers: (min_score, xp) pairs in any order

        Raises:
            ConfigurationError: On invalid questions, limits or tiers
        """
        quiz = Quiz.create(
            title, time_limit_seconds, passing_score_percent, questions, reward_tiers
        )
        saved = self.uow.run(lambda: self.quiz_repository.save(quiz))
        logger.info(
            "quiz_created",
            quiz_id=saved.id.value,
            question_count=len(saved.questions),
            tiers=saved.reward_tiers.to_primitive(),
        )
        return saved

    def get_quiz(self, quiz_id: int) -> Quiz:
        quiz = self.quiz_repository.find_by_id(QuizId(quiz_id))
        if quiz is None:
            raise EntityNotFoundError("Quiz", quiz_id)
        return quiz

    def replace_reward_tiers(self, quiz_id: int, reward_tiers: list[tuple[int, int]]) -> Quiz:
        """
        Swap a quiz's tier table and bump its version.

        Attempts already started keep the tier table they started with.
        """
        tiers = RewardTierTable.from_pairs(reward_tiers)

        def work() -> Quiz:
            quiz = self.get_quiz(quiz_id)
            quiz.replace_reward_tiers(tiers)
            return self.quiz_repository.save(quiz)

        saved = self.uow.run(work)
        logger.info("quiz_reward_tiers_replaced", quiz_id=quiz_id, version=saved.version)
        return saved

    def define_badge(
        self,
        name: str,
        conditions: list[ConditionSpec],
        description: str = "",
        xp_reward: int = 0,
    ) -> Badge:
        """
        Create a badge from (stat_type, operator, threshold) conditions.

        Raises:
            ConfigurationError: On an unknown stat type or operator, a negative
                threshold, an empty condition list or a negative bonus
        """
        badge = Badge.create(name, _parse_conditions(conditions), description, xp_reward)
        saved = self.uow.run(lambda: self.badge_repository.save(badge))
        logger.info("badge_defined", badge_id=saved.id.value, name=saved.name)
        return saved

    def update_badge(
        self,
        badge_id: int,
        name: str,
        conditions: list[ConditionSpec],
        description: str = "",
        xp_reward: int = 0,
    ) -> Badge:
        """
        Redefine a badge and bump its version.

        Learners who already hold the badge keep it.
        """
        parsed = _parse_conditions(conditions)

        def work() -> Badge:
            badge = self.badge_repository.find_by_id(BadgeId(badge_id))
            if badge is None:
                raise EntityNotFoundError("Badge", badge_id)
            badge.redefine(name, parsed, description, xp_reward)
            return self.badge_repository.save(badge)

        saved = self.uow.run(work)
        logger.info("badge_updated", badge_id=badge_id, version=saved.version)
        return saved

    def create_challenge(
        self,
        title: str,
        start_at: datetime,
        end_at: datetime,
        max_participants: int = 0,
        xp_reward: int = 0,
        badge_reward_id: int | None = None,
    ) -> Challenge:
        """
        Create a challenge.

        Raises:
            ConfigurationError: On an empty window or negative limits
            EntityNotFoundError: If the reward badge does not exist
        """
        reward = BadgeId(badge_reward_id) if badge_reward_id is not None else None
        challenge = Challenge.create(title, start_at, end_at, max_participants, xp_reward, reward)

        def work() -> Challenge:
            if reward is not None and self.badge_repository.find_by_id(reward) is None:
                raise EntityNotFoundError("Badge", reward.value)
            return self.challenge_repository.save(challenge)

        saved = self.uow.run(work)
        logger.info(
            "challenge_created",
            challenge_id=saved.id.value,
            max_participants=saved.max_participants,
        )
        return saved


def _parse_conditions(conditions: list[ConditionSpec]) -> list[UnlockCondition]:
    if not conditions:
        raise ConfigurationError("A badge needs at least one condition", field="conditions")
    return [
        UnlockCondition.parse(stat_type, operator, threshold)
        for stat_type, operator, threshold in conditions
    ]
