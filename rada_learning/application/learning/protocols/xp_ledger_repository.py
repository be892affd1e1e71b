"""Protocol for the append-only XP ledger."""

from datetime import date, datetime
from typing import Protocol

from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.xp_transaction import AwardKey, XPTransaction


class XPLedgerRepositoryProtocol(Protocol):
    """
    Protocol for XP ledger storage.

    There is deliberately no update or delete operation.
    """

    def find_by_key(self, key: AwardKey) -> XPTransaction | None:
        """Find the transaction recorded for a dedup key."""
        ...

    def add(self, transaction: XPTransaction) -> XPTransaction:
        """
        Append a transaction.

        Raises:
            sqlalchemy.exc.IntegrityError: When another writer recorded the key first
        """
        ...

    def total_for(self, learner_id: LearnerId) -> int:
        """Sum of all amounts for the learner."""
        ...

    def find_by_learner(self, learner_id: LearnerId, limit: int = 100) -> list[XPTransaction]:
        """Transactions newest first."""
        ...

    def daily_totals(self, learner_id: LearnerId, since: datetime) -> dict[date, int]:
        """XP per UTC calendar day for transactions created at or after `since`."""
        ...
