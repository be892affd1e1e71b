"""
Base class for Entities.

Entities carry an identity that runs through time. Two entities are equal
when their ids are equal, whatever their other attributes say.

Example:
    @dataclass
    class Learner(Entity[LearnerId]):
        id: LearnerId
        current_streak: int
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, Self, TypeVar

from .value_object import ValueObject


@dataclass(frozen=True)
class EntityId(ValueObject):
    """
    Base class for strongly-typed entity identifiers.

    Ids wrap a non-negative integer. Zero is the placeholder for an entity
    that has not been persisted yet; the database assigns the real value.

    Example:
        @dataclass(frozen=True)
        class LessonId(EntityId):
            pass

        LessonId(3) == ModuleId(3)  # False, different types
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError(f"{self.__class__.__name__} must wrap an int")
        if self.value < 0:
            raise ValueError(f"{self.__class__.__name__} must be non-negative")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    @property
    def is_transient(self) -> bool:
        """Whether the id is still the unsaved placeholder."""
        return self.value == 0

    @classmethod
    def generate(cls) -> Self:
        """Set placeholder id. Usually these are set by the database"""
        return cls(0)

    def to_primitive(self) -> int:
        """Convert to primitive for serialization."""
        return self.value


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """
    Base class for Entities in the domain model.

    Subclasses must have an 'id' attribute of type IdType.
    """

    id: IdType

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
