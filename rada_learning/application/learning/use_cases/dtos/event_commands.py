"""Commands parsed from incoming learner events."""

from dataclasses import dataclass

from rada_learning.application.common.command import Command


@dataclass(frozen=True)
class CompleteLessonCommand(Command):
    learner_id: int
    lesson_id: int


@dataclass(frozen=True)
class StartModuleCommand(Command):
    learner_id: int
    module_id: int


@dataclass(frozen=True)
class StartQuizAttemptCommand(Command):
    learner_id: int
    quiz_id: int


@dataclass(frozen=True)
class SubmitQuizAnswerCommand(Command):
    attempt_id: int
    question_id: int
    answer_index: int


@dataclass(frozen=True)
class SubmitQuizCommand(Command):
    attempt_id: int


@dataclass(frozen=True)
class JoinChallengeCommand(Command):
    learner_id: int
    challenge_id: int


@dataclass(frozen=True)
class CompleteChallengeCommand(Command):
    learner_id: int
    challenge_id: int


@dataclass(frozen=True)
class ReportCommunityPostsCommand(Command):
    learner_id: int
    post_count: int
