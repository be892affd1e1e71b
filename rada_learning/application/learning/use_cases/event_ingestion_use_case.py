"""
Event ingestion boundary.

Routes each command to the use case that owns it. Duplicate deliveries are
answered with the original outcome and `duplicate` set, never an error.
"""

import structlog

from rada_learning.application.common.command import Command
from rada_learning.application.learning.use_cases.challenge_use_case import ChallengeUseCase
from rada_learning.application.learning.use_cases.community_use_case import (
    CommunityActivityUseCase,
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
from rada_learning.application.learning.use_cases.progression_use_case import ProgressionUseCase
from rada_learning.application.learning.use_cases.quiz_attempt_use_case import (
    QuizAttemptUseCase,
)

logger = structlog.get_logger(__name__)


class UnsupportedEventError(TypeError):
    """Raised for a command type no handler is registered for."""


class EventIngestionUseCase:
    """Dispatches learner event commands."""

    def __init__(
        self,
        progression_use_case: ProgressionUseCase,
        quiz_attempt_use_case: QuizAttemptUseCase,
        challenge_use_case: ChallengeUseCase,
        community_use_case: CommunityActivityUseCase,
    ) -> None:
        self.progression_use_case = progression_use_case
        self.quiz_attempt_use_case = quiz_attempt_use_case
        self.challenge_use_case = challenge_use_case
        self.community_use_case = community_use_case

    def ingest(self, command: Command) -> object:
        """
        Handle one event.

        Returns:
            The owning use case's result DTO

        Raises:
            UnsupportedEventError: If no handler is registered for the command
        """
        logger.debug("event_received", command=type(command).__name__)
        match command:
            case CompleteLessonCommand(learner_id=learner_id, lesson_id=lesson_id):
                return self.progression_use_case.complete_lesson(learner_id, lesson_id)
            case StartModuleCommand(learner_id=learner_id, module_id=module_id):
                return self.progression_use_case.start_module(learner_id, module_id)
            case StartQuizAttemptCommand(learner_id=learner_id, quiz_id=quiz_id):
                return self.quiz_attempt_use_case.start_attempt(learner_id, quiz_id)
            case SubmitQuizAnswerCommand(
                attempt_id=attempt_id, question_id=question_id, answer_index=answer_index
            ):
                return self.quiz_attempt_use_case.submit_answer(
                    attempt_id, question_id, answer_index
                )
            case SubmitQuizCommand(attempt_id=attempt_id):
                return self.quiz_attempt_use_case.submit_attempt(attempt_id)
            case JoinChallengeCommand(learner_id=learner_id, challenge_id=challenge_id):
                return self.challenge_use_case.join(learner_id, challenge_id)
            case CompleteChallengeCommand(learner_id=learner_id, challenge_id=challenge_id):
                return self.challenge_use_case.complete(learner_id, challenge_id)
            case ReportCommunityPostsCommand(learner_id=learner_id, post_count=post_count):
                return self.community_use_case.record_community_posts(learner_id, post_count)
            case _:
                raise UnsupportedEventError(f"No handler for {type(command).__name__}")
