"""Learning domain exceptions."""

from datetime import datetime

from rada_learning.domain.common.exceptions import BusinessRuleViolationError


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when a state machine is asked for a transition it does not allow."""

    code = "invalid_transition"

    def __init__(self, entity: str, current: str, requested: str, **details: object) -> None:
        super().__init__(
            "invalid_transition",
            f"Cannot {requested} {entity} while it is {current}",
            current=current,
            requested=requested,
            **details,
        )
        self.current = current
        self.requested = requested


class AttemptLockedError(BusinessRuleViolationError):
    """Raised when writing to a quiz attempt that is locked or past its deadline."""

    code = "attempt_locked"

    def __init__(self, attempt_id: int, *, expired: bool = False) -> None:
        reason = "deadline has passed" if expired else "attempt is locked"
        super().__init__(
            "attempt_locked",
            f"Quiz attempt {attempt_id} no longer accepts answers: {reason}",
            attempt_id=attempt_id,
            expired=expired,
        )
        self.attempt_id = attempt_id
        self.expired = expired


class ChallengeNotActiveError(BusinessRuleViolationError):
    """Raised when joining a challenge outside its active window."""

    code = "challenge_not_active"

    def __init__(self, challenge_id: int, status: str) -> None:
        super().__init__(
            "challenge_not_active",
            f"Challenge {challenge_id} is {status}",
            challenge_id=challenge_id,
            status=status,
        )
        self.challenge_id = challenge_id
        self.status = status


class CapacityExceededError(BusinessRuleViolationError):
    """Raised when a challenge has no free participant slots."""

    code = "capacity_exceeded"

    def __init__(self, challenge_id: int, max_participants: int) -> None:
        super().__init__(
            "capacity_exceeded",
            f"Challenge {challenge_id} is full ({max_participants} participants)",
            challenge_id=challenge_id,
            max_participants=max_participants,
        )
        self.challenge_id = challenge_id
        self.max_participants = max_participants


class LateSubmissionError(BusinessRuleViolationError):
    """Raised when completing a challenge after it has closed."""

    code = "late_submission"

    def __init__(self, challenge_id: int, end_at: datetime) -> None:
        super().__init__(
            "late_submission",
            f"Challenge {challenge_id} closed at {end_at.isoformat()}",
            challenge_id=challenge_id,
            end_at=end_at.isoformat(),
        )
        self.challenge_id = challenge_id
        self.end_at = end_at
