"""In-process per-learner lock registry."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from rada_learning.exceptions import ServiceUnavailableError

logger = structlog.get_logger(__name__)


class _LearnerLock:
    def __init__(self) -> None:
        self.lock = threading.RLock()
        # Threads holding or waiting on the lock
        self.users = 0


class LearnerLockRegistry:
    """
    One re-entrant lock per learner.

    Events for the same learner run one at a time; events for different
    learners never wait on each other. A learner's lock is dropped once no
    thread holds or waits on it, so the registry only keeps active learners.
    """

    def __init__(self) -> None:
        self._locks: dict[int, _LearnerLock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, learner_id: int) -> _LearnerLock:
        with self._guard:
            entry = self._locks.get(learner_id)
            if entry is None:
                entry = _LearnerLock()
                self._locks[learner_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, learner_id: int, entry: _LearnerLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[learner_id]

    @contextmanager
    def hold(self, learner_id: int, timeout: float) -> Iterator[None]:
        """
        Hold the learner's lock for the duration of the block.

        Raises:
            ServiceUnavailableError: If the lock is not free within `timeout` seconds
        """
        entry = self._checkout(learner_id)
        try:
            if not entry.lock.acquire(timeout=timeout):
                logger.warning(
                    "learner_lock_timeout", learner_id=learner_id, timeout_seconds=timeout
                )
                raise ServiceUnavailableError(
                    f"Learner {learner_id} is busy, retry later", learner_id=learner_id
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(learner_id, entry)
