"""API routes for learner progress queries."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from rada_learning.application.learning.use_cases.learner_progress_use_case import (
    LearnerProgressUseCase,
)
from rada_learning.core import container
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.exceptions import RadaError
from rada_learning.infrastructure.common.di import inject_use_case
from rada_learning.infrastructure.learning.schemas import (
    ActivityResponse,
    BadgeProgressResponse,
    BadgeProgressSchema,
    DailyXPSchema,
    EarnedBadgeSchema,
    LearnerProgressResponse,
    LessonProgressSchema,
    ModuleProgressSchema,
    XPHistoryResponse,
    XPTransactionSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learners", tags=["learners"])


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get(
    "/{learner_id}/progress",
    response_model=LearnerProgressResponse,
    status_code=status.HTTP_200_OK,
)
def get_learner_progress(
    learner_id: int,
    use_case: LearnerProgressUseCase = Depends(
        inject_use_case(container.learner_progress_use_case)
    ),
) -> LearnerProgressResponse:
    """
    Get a learner's progress across every module, with XP, level, streak and badges.

    A learner with no recorded activity gets an empty snapshot.
    """
    try:
        progress = use_case.get_progress(learner_id)
        return LearnerProgressResponse(
            learner_id=progress.learner_id,
            total_xp=progress.total_xp,
            level=progress.level,
            current_streak=progress.current_streak,
            longest_streak=progress.longest_streak,
            modules=[
                ModuleProgressSchema(
                    module_id=module.module_id,
                    title=module.title,
                    status=module.status,
                    completed_at=module.completed_at,
                    lessons=[
                        LessonProgressSchema(
                            lesson_id=lesson.lesson_id,
                            title=lesson.title,
                            order_index=lesson.order_index,
                            status=lesson.status,
                            completed_at=lesson.completed_at,
                        )
                        for lesson in module.lessons
                    ],
                )
                for module in progress.modules
            ],
            badges_earned=[
                EarnedBadgeSchema(
                    badge_id=badge.badge_id, name=badge.name, awarded_at=badge.awarded_at
                )
                for badge in progress.badges_earned
            ],
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get progress for learner {learner_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.get(
    "/{learner_id}/xp-transactions",
    response_model=XPHistoryResponse,
    status_code=status.HTTP_200_OK,
)
def get_xp_transactions(
    learner_id: int,
    limit: int = Query(100, ge=1, le=1000, description="Maximum entries to return"),
    use_case: LearnerProgressUseCase = Depends(
        inject_use_case(container.learner_progress_use_case)
    ),
) -> XPHistoryResponse:
    """Get a learner's XP ledger, most recent first."""
    try:
        transactions = use_case.get_xp_history(learner_id, limit)
        return XPHistoryResponse(
            learner_id=learner_id,
            total_xp=use_case.get_total_xp(learner_id),
            transactions=[
                XPTransactionSchema(
                    id=transaction.id.value,
                    source_type=transaction.source_type.value,
                    source_id=transaction.source_id,
                    amount=transaction.amount,
                    description=transaction.description,
                    created_at=transaction.created_at,
                )
                for transaction in transactions
            ],
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get XP history for learner {learner_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.get(
    "/{learner_id}/activity",
    response_model=ActivityResponse,
    status_code=status.HTTP_200_OK,
)
def get_activity(
    learner_id: int,
    days: int | None = Query(
        None, ge=1, le=365, description="Trailing window in days, including today"
    ),
    use_case: LearnerProgressUseCase = Depends(
        inject_use_case(container.learner_progress_use_case)
    ),
) -> ActivityResponse:
    """Get XP earned per UTC day, oldest first, with zero-XP days included."""
    try:
        daily = use_case.get_activity(learner_id, days)
        return ActivityResponse(
            learner_id=learner_id,
            days=[DailyXPSchema(day=entry.day, xp=entry.xp) for entry in daily],
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get activity for learner {learner_id}: {e!s}", exc_info=True)
        raise _internal_error() from e


@router.get(
    "/{learner_id}/badge-progress",
    response_model=BadgeProgressResponse,
    status_code=status.HTTP_200_OK,
)
def get_badge_progress(
    learner_id: int,
    use_case: LearnerProgressUseCase = Depends(
        inject_use_case(container.learner_progress_use_case)
    ),
) -> BadgeProgressResponse:
    """Get how close a learner is to every defined badge."""
    try:
        entries = use_case.get_badge_progress(learner_id)
        return BadgeProgressResponse(
            learner_id=learner_id,
            badges=[
                BadgeProgressSchema(
                    badge_id=entry.badge.id.value,
                    name=entry.badge.name,
                    description=entry.badge.description,
                    earned=entry.earned,
                    progress_percent=entry.progress_percent,
                    awarded_at=entry.awarded_at,
                )
                for entry in entries
            ],
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(
            f"Failed to get badge progress for learner {learner_id}: {e!s}", exc_info=True
        )
        raise _internal_error() from e
