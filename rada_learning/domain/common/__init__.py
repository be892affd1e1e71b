"""
Domain common module.

Base building blocks shared by every bounded context:
- ValueObject: immutable, compared by value
- Entity: identity that survives state changes
- AggregateRoot: consistency boundary that records domain events
- DomainEvent: past-tense fact emitted by an aggregate
"""

from .aggregate_root import AggregateRoot
from .domain_event import DomainEvent
from .entity import Entity, EntityId
from .exceptions import (
    BusinessRuleViolationError,
    ConfigurationError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from .value_object import ValueObject

__all__ = [
    "AggregateRoot",
    "BusinessRuleViolationError",
    "ConfigurationError",
    "DomainError",
    "DomainEvent",
    "Entity",
    "EntityId",
    "EntityNotFoundError",
    "ValidationError",
    "ValueObject",
]
