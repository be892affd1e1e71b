"""API route for ingesting learner events."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rada_learning.application.common.command import Command
from rada_learning.application.learning.use_cases.dtos import (
    AnswerRecorded,
    AttemptStarted,
    ChallengeCompletionResult,
    ChallengeJoinResult,
    CommunityPostsResult,
    LessonCompletionResult,
    ModuleStartResult,
    QuizSubmission,
)
from rada_learning.application.learning.use_cases.dtos.event_commands import (
    CompleteChallengeCommand,
    CompleteLessonCommand,
    JoinChallengeCommand,
    ReportCommunityPostsCommand,
    StartModuleCommand,
    StartQuizAttemptCommand,
    SubmitQuizAnswerCommand,
    SubmitQuizCommand,
)
from rada_learning.application.learning.use_cases.event_ingestion_use_case import (
    EventIngestionUseCase,
)
from rada_learning.core import container
from rada_learning.domain.common.exceptions import DomainError
from rada_learning.domain.learning.entities.badge import Badge
from rada_learning.domain.learning.entities.module_progress import LessonStatus
from rada_learning.exceptions import RadaError
from rada_learning.infrastructure.common.di import inject_use_case
from rada_learning.infrastructure.learning import schemas
from rada_learning.infrastructure.learning.schemas import EventResponse, LearnerEvent
from rada_learning.infrastructure.learning.schemas.event_schemas import (
    ChallengeCompleteEvent,
    ChallengeJoinEvent,
    CommunityPostsUpdatedEvent,
    EventResult,
    LessonCompletedEvent,
    ModuleStartedEvent,
    QuizAnswerSubmitEvent,
    QuizAttemptStartEvent,
    QuizSubmitEvent,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_200_OK)
def ingest_event(
    event: LearnerEvent,
    use_case: EventIngestionUseCase = Depends(
        inject_use_case(container.event_ingestion_use_case)
    ),
) -> EventResponse:
    """
    Apply one learner event.

    Events are idempotent: a replayed event returns 200 with duplicate=true
    and changes nothing.

    Raises:
        HTTPException: If processing fails unexpectedly
    """
    try:
        outcome = use_case.ingest(_to_command(event))
        duplicate, result = _to_result(outcome)
        return EventResponse(
            success=True,
            message="Event already applied" if duplicate else "Event applied",
            type=event.type,
            duplicate=duplicate,
            result=result,
        )
    except (RadaError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to process {event.type} event: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


def _to_command(event: LearnerEvent) -> Command:
    match event:
        case LessonCompletedEvent():
            return CompleteLessonCommand(learner_id=event.learner_id, lesson_id=event.lesson_id)
        case ModuleStartedEvent():
            return StartModuleCommand(learner_id=event.learner_id, module_id=event.module_id)
        case QuizAttemptStartEvent():
            return StartQuizAttemptCommand(learner_id=event.learner_id, quiz_id=event.quiz_id)
        case QuizAnswerSubmitEvent():
            return SubmitQuizAnswerCommand(
                attempt_id=event.attempt_id,
                question_id=event.question_id,
                answer_index=event.answer_index,
            )
        case QuizSubmitEvent():
            return SubmitQuizCommand(attempt_id=event.attempt_id)
        case ChallengeJoinEvent():
            return JoinChallengeCommand(
                learner_id=event.learner_id, challenge_id=event.challenge_id
            )
        case ChallengeCompleteEvent():
            return CompleteChallengeCommand(
                learner_id=event.learner_id, challenge_id=event.challenge_id
            )
        case CommunityPostsUpdatedEvent():
            return ReportCommunityPostsCommand(
                learner_id=event.learner_id, post_count=event.post_count
            )
    raise TypeError(f"Unhandled event schema {type(event).__name__}")


def _awarded(badges: list[Badge]) -> list[schemas.AwardedBadge]:
    return [
        schemas.AwardedBadge(id=badge.id.value, name=badge.name, xp_reward=badge.xp_reward)
        for badge in badges
    ]


def _to_result(outcome: object) -> tuple[bool, EventResult]:
    """Convert a use case DTO into (duplicate, response schema)."""
    match outcome:
        case LessonCompletionResult():
            return outcome.duplicate, schemas.LessonCompletedResult(
                lesson_id=outcome.lesson_id,
                module_id=outcome.module_id,
                completed_at=outcome.completed_at,
                xp_awarded=outcome.xp_awarded,
                unlocked_lesson_id=outcome.unlocked_lesson_id,
                module_completed=outcome.module_completed,
                module_xp_awarded=outcome.module_xp_awarded,
                badges_awarded=_awarded(outcome.badges_awarded),
            )
        case ModuleStartResult():
            progress = outcome.progress
            return outcome.duplicate, schemas.ModuleStartedResult(
                module_id=progress.module_id.value,
                status=progress.status.value,
                unlocked_lesson_ids=[
                    lesson_id.value
                    for lesson_id, lesson in progress.lessons.items()
                    if lesson.status is LessonStatus.UNLOCKED
                ],
            )
        case AttemptStarted():
            return False, schemas.QuizAttemptStartedResult(
                attempt_id=outcome.attempt_id,
                quiz_id=outcome.quiz_id,
                started_at=outcome.started_at,
                deadline=outcome.deadline,
            )
        case AnswerRecorded():
            return False, schemas.QuizAnswerResult(
                attempt_id=outcome.attempt_id,
                question_id=outcome.question_id,
                answer_index=outcome.answer_index,
            )
        case QuizSubmission():
            result = outcome.result
            return outcome.duplicate, schemas.QuizSubmitResult(
                attempt_id=result.attempt_id.value,
                score_percent=result.score_percent,
                passed=result.passed,
                xp_awarded=result.xp_awarded,
                submitted_at=result.submitted_at,
                badges_awarded=_awarded(outcome.badges_awarded),
            )
        case ChallengeJoinResult():
            return outcome.duplicate, schemas.ChallengeJoinResult(
                challenge_id=outcome.challenge_id, joined_at=outcome.joined_at
            )
        case ChallengeCompletionResult():
            return outcome.duplicate, schemas.ChallengeCompleteResult(
                challenge_id=outcome.challenge_id,
                completed_at=outcome.completed_at,
                xp_awarded=outcome.xp_awarded,
                reward_badge=(
                    _awarded([outcome.reward_badge])[0] if outcome.reward_badge else None
                ),
                badges_awarded=_awarded(outcome.badges_awarded),
            )
        case CommunityPostsResult():
            return outcome.duplicate, schemas.CommunityPostsResult(
                learner_id=outcome.learner_id,
                post_count=outcome.post_count,
                badges_awarded=_awarded(outcome.badges_awarded),
            )
    raise TypeError(f"Unhandled result {type(outcome).__name__}")
