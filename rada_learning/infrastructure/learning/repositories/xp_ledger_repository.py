"""Repository for the append-only XP ledger."""

from collections import defaultdict
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.xp_transaction import AwardKey, XPTransaction
from rada_learning.infrastructure.learning.mappers.xp_transaction_mapper import (
    XPTransactionMapper,
)
from rada_learning.models import XPTransaction as XPTransactionORM
from rada_learning.utils import ensure_utc


class XPLedgerRepository:
    """Repository for XPTransaction entries. There is no update or delete."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = XPTransactionMapper()

    def find_by_key(self, key: AwardKey) -> XPTransaction | None:
        stmt = select(XPTransactionORM).where(
            XPTransactionORM.learner_id == key.learner_id.value,
            XPTransactionORM.source_type == key.source_type.value,
            XPTransactionORM.source_id == key.source_id,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def add(self, transaction: XPTransaction) -> XPTransaction:
        """
        Append an entry.

        A concurrent award with the same key fails the unique constraint on
        flush; the unit of work retries the whole operation, which then sees
        the existing entry.
        """
        orm_model = self.mapper.to_orm(transaction)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def total_for(self, learner_id: LearnerId) -> int:
        stmt = select(func.coalesce(func.sum(XPTransactionORM.amount), 0)).where(
            XPTransactionORM.learner_id == learner_id.value
        )
        return int(self.db.execute(stmt).scalar_one())

    def find_by_learner(self, learner_id: LearnerId, limit: int = 100) -> list[XPTransaction]:
        """Most recent entries first."""
        stmt = (
            select(XPTransactionORM)
            .where(XPTransactionORM.learner_id == learner_id.value)
            .order_by(XPTransactionORM.created_at.desc(), XPTransactionORM.id.desc())
            .limit(limit)
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def daily_totals(self, learner_id: LearnerId, since: datetime) -> dict[date, int]:
        """
        Sum XP per UTC calendar day for entries created at or after `since`.

        Grouped in Python because SQLite and PostgreSQL disagree on date
        truncation of timezone-aware columns.
        """
        stmt = select(XPTransactionORM.created_at, XPTransactionORM.amount).where(
            XPTransactionORM.learner_id == learner_id.value,
            XPTransactionORM.created_at >= since,
        )
        totals: dict[date, int] = defaultdict(int)
        for created_at, amount in self.db.execute(stmt).all():
            totals[ensure_utc(created_at).date()] += amount
        return dict(totals)
