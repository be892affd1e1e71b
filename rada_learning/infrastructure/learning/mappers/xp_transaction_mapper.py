"""Mapper for XPTransaction ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import LearnerId, XPTransactionId
from rada_learning.domain.learning.entities.xp_transaction import XPSource, XPTransaction
from rada_learning.models import XPTransaction as XPTransactionORM
from rada_learning.utils import ensure_utc


class XPTransactionMapper:
    """Mapper for XPTransaction ORM ↔ Domain conversion. Ledger rows are never updated."""

    def to_domain(self, orm_model: XPTransactionORM) -> XPTransaction:
        """Convert ORM model to domain entity."""
        return XPTransaction(
            id=XPTransactionId(orm_model.id),
            learner_id=LearnerId(orm_model.learner_id),
            source_type=XPSource(orm_model.source_type),
            source_id=orm_model.source_id,
            amount=orm_model.amount,
            description=orm_model.description,
            created_at=ensure_utc(orm_model.created_at),
        )

    def to_orm(self, domain_entity: XPTransaction) -> XPTransactionORM:
        """Convert a new domain entity to ORM model."""
        orm_model = XPTransactionORM(
            learner_id=domain_entity.learner_id.value,
            source_type=domain_entity.source_type.value,
            source_id=domain_entity.source_id,
            amount=domain_entity.amount,
            description=domain_entity.description,
        )
        if domain_entity.created_at is not None:
            orm_model.created_at = domain_entity.created_at
        return orm_model
