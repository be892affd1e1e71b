"""
Command base class.

Commands represent intentions to change the system state. Incoming learner
events are parsed at the API boundary into commands and routed to the use
case that owns them.

Example:
    @dataclass(frozen=True)
    class CompleteLessonCommand(Command):
        learner_id: int
        lesson_id: int
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """
    Base class for Commands.

    Commands are:
    - Immutable (frozen dataclass)
    - Named in imperative form (CompleteLesson, not LessonCompletion)
    - Carry all data needed to execute the operation
    - Validated at the API boundary before reaching a use case
    """
