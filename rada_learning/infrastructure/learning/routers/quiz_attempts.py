"""API routes for reading quiz attempts."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rada_learning.application.learning.use_cases.quiz_attempt_use_case import (
    QuizAttemptUseCase,
)
from rada_learning.core import container
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.exceptions import RadaError
from rada_learning.infrastructure.common.di import inject_use_case
from rada_learning.infrastructure.learning.schemas import QuizAttemptResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz-attempts", tags=["quiz-attempts"])


@router.get(
    "/{attempt_id}",
    response_model=QuizAttemptResponse,
    status_code=status.HTTP_200_OK,
)
def get_quiz_attempt(
    attempt_id: int,
    use_case: QuizAttemptUseCase = Depends(inject_use_case(container.quiz_attempt_use_case)),
) -> QuizAttemptResponse:
    """
    Get a quiz attempt.

    Reading never locks an attempt; `expired` tells the caller its deadline
    has passed and the next write will lock it.
    """
    try:
        view = use_case.get_attempt(attempt_id)
        attempt = view.attempt
        return QuizAttemptResponse(
            id=attempt.id.value,
            learner_id=attempt.learner_id.value,
            quiz_id=attempt.quiz_id.value,
            quiz_version=attempt.quiz_version,
            started_at=attempt.started_at,
            deadline=attempt.deadline,
            answers=dict(attempt.answers),
            locked=attempt.locked,
            expired=view.expired,
            submitted_at=attempt.submitted_at,
            score_percent=attempt.score_percent,
            passed=attempt.passed,
            xp_awarded=attempt.xp_awarded,
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to get quiz attempt {attempt_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
