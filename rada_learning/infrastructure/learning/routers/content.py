"""API routes for authoring modules, quizzes, badges and challenges."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rada_learning.application.learning.use_cases.content_use_case import ContentUseCase
from rada_learning.core import container
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.domain.learning.entities.badge import Badge
from rada_learning.domain.learning.entities.challenge import Challenge
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.entities.quiz import Quiz
from rada_learning.exceptions import RadaError
from rada_learning.infrastructure.common.di import inject_use_case
from rada_learning.infrastructure.learning.schemas import (
    BadgeDefinitionRequest,
    BadgeResponse,
    BadgeSchema,
    ChallengeCreateRequest,
    ChallengeResponse,
    ChallengeSchema,
    ConditionSchema,
    LessonSchema,
    ModuleCreateRequest,
    ModuleResponse,
    ModuleSchema,
    QuestionSchema,
    QuizCreateRequest,
    QuizResponse,
    QuizSchema,
    RewardTierSchema,
    RewardTiersUpdateRequest,
)
from rada_learning.utils import ensure_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


def _module_schema(module: LearningModule) -> ModuleSchema:
    return ModuleSchema(
        id=module.id.value,
        title=module.title,
        xp_reward=module.xp_reward,
        lessons=[
            LessonSchema(
                id=lesson.id.value,
                title=lesson.title,
                order_index=lesson.order_index,
                xp_reward=lesson.xp_reward,
            )
            for lesson in module.lessons
        ],
    )


def _quiz_schema(quiz: Quiz) -> QuizSchema:
    return QuizSchema(
        id=quiz.id.value,
        title=quiz.title,
        time_limit_seconds=quiz.time_limit_seconds,
        passing_score_percent=quiz.passing_score_percent,
        version=quiz.version,
        questions=[
            QuestionSchema(
                id=question.id.value,
                prompt=question.prompt,
                option_count=question.option_count,
                position=question.position,
            )
            for question in quiz.questions
        ],
        reward_tiers=[RewardTierSchema(**tier) for tier in quiz.reward_tiers.to_primitive()],
    )


def _badge_schema(badge: Badge) -> BadgeSchema:
    return BadgeSchema(
        id=badge.id.value,
        name=badge.name,
        description=badge.description,
        xp_reward=badge.xp_reward,
        version=badge.version,
        conditions=[
            ConditionSchema(
                stat_type=condition.stat_type.value,
                operator=condition.operator.value,
                threshold=condition.threshold,
            )
            for condition in badge.conditions
        ],
    )


def _challenge_schema(challenge: Challenge) -> ChallengeSchema:
    return ChallengeSchema(
        id=challenge.id.value,
        title=challenge.title,
        start_at=challenge.start_at,
        end_at=challenge.end_at,
        max_participants=challenge.max_participants,
        participant_count=challenge.participant_count,
        xp_reward=challenge.xp_reward,
        badge_reward_id=challenge.badge_reward_id.value if challenge.badge_reward_id else None,
    )


@router.post("/modules", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED)
def create_module(
    request: ModuleCreateRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> ModuleResponse:
    """Create a module with its lessons in learning order."""
    try:
        module = use_case.create_module(
            title=request.title,
            lessons=[(lesson.title, lesson.xp_reward) for lesson in request.lessons],
            xp_reward=request.xp_reward,
        )
        return ModuleResponse(
            success=True, message="Module created successfully", module=_module_schema(module)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to create module: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.get("/modules/{module_id}", response_model=ModuleResponse, status_code=status.HTTP_200_OK)
def get_module(
    module_id: int,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> ModuleResponse:
    """Get a module with its lessons."""
    try:
        module = use_case.get_module(module_id)
        return ModuleResponse(
            success=True, message="Module retrieved successfully", module=_module_schema(module)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get module {module_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.post("/quizzes", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(
    request: QuizCreateRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> QuizResponse:
    """
    Create a quiz with its questions and reward tier table.

    An invalid tier table (duplicate thresholds, out-of-range scores, negative
    XP) is rejected with 422 and nothing is stored.
    """
    try:
        quiz = use_case.create_quiz(
            title=request.title,
            time_limit_seconds=request.time_limit_seconds,
            passing_score_percent=request.passing_score_percent,
            questions=[
                (question.prompt, question.option_count, question.correct_index)
                for question in request.questions
            ],
            reward_tiers=[(tier.min_score, tier.xp) for tier in request.reward_tiers],
        )
        return QuizResponse(
            success=True, message="Quiz created successfully", quiz=_quiz_schema(quiz)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to create quiz: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.get("/quizzes/{quiz_id}", response_model=QuizResponse, status_code=status.HTTP_200_OK)
def get_quiz(
    quiz_id: int,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> QuizResponse:
    """Get a quiz. Correct answers are not included."""
    try:
        quiz = use_case.get_quiz(quiz_id)
        return QuizResponse(
            success=True, message="Quiz retrieved successfully", quiz=_quiz_schema(quiz)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get quiz {quiz_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.put(
    "/quizzes/{quiz_id}/reward-tiers",
    response_model=QuizResponse,
    status_code=status.HTTP_200_OK,
)
def replace_reward_tiers(
    quiz_id: int,
    request: RewardTiersUpdateRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> QuizResponse:
    """Replace a quiz's reward tier table. Already scored attempts keep their XP."""
    try:
        quiz = use_case.replace_reward_tiers(
            quiz_id, [(tier.min_score, tier.xp) for tier in request.reward_tiers]
        )
        return QuizResponse(
            success=True, message="Reward tiers updated successfully", quiz=_quiz_schema(quiz)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to replace reward tiers for quiz {quiz_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.post("/badges", response_model=BadgeResponse, status_code=status.HTTP_201_CREATED)
def define_badge(
    request: BadgeDefinitionRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> BadgeResponse:
    """
    Define a badge.

    Unknown stat types or operators are rejected with 422 when the badge is
    saved, never skipped later.
    """
    try:
        badge = use_case.define_badge(
            name=request.name,
            conditions=[
                (condition.stat_type, condition.operator, condition.threshold)
                for condition in request.conditions
            ],
            description=request.description,
            xp_reward=request.xp_reward,
        )
        return BadgeResponse(
            success=True, message="Badge defined successfully", badge=_badge_schema(badge)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to define badge: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.put("/badges/{badge_id}", response_model=BadgeResponse, status_code=status.HTTP_200_OK)
def update_badge(
    badge_id: int,
    request: BadgeDefinitionRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> BadgeResponse:
    """Redefine a badge. Learners who already hold it keep it."""
    try:
        badge = use_case.update_badge(
            badge_id=badge_id,
            name=request.name,
            conditions=[
                (condition.stat_type, condition.operator, condition.threshold)
                for condition in request.conditions
            ],
            description=request.description,
            xp_reward=request.xp_reward,
        )
        return BadgeResponse(
            success=True, message="Badge updated successfully", badge=_badge_schema(badge)
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to update badge {badge_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.post("/challenges", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
def create_challenge(
    request: ChallengeCreateRequest,
    use_case: ContentUseCase = Depends(inject_use_case(container.content_use_case)),
) -> ChallengeResponse:
    """Create a challenge. max_participants 0 means unlimited."""
    try:
        challenge = use_case.create_challenge(
            title=request.title,
            start_at=ensure_utc(request.start_at),
            end_at=ensure_utc(request.end_at),
            max_participants=request.max_participants,
            xp_reward=request.xp_reward,
            badge_reward_id=request.badge_reward_id,
        )
        return ChallengeResponse(
            success=True,
            message="Challenge created successfully",
            challenge=_challenge_schema(challenge),
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to create challenge: {e!s}", exc_info=True)
        raise _internal_error() from e
