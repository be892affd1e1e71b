"""
Learning module and lesson content entities.

Content is authored by admins and read by the progression engine; the
ordering of lessons inside a module drives sequential unlocking.
"""

from dataclasses import dataclass, field

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ConfigurationError
from rada_learning.domain.common.value_objects import LessonId, ModuleId


@dataclass
class Lesson(Entity[LessonId]):
    """
    A single lesson inside a module.

    Business Rules:
    - order_index is 1-based and unique within the module
    - xp_reward cannot be negative (zero means no lesson XP)
    """

    id: LessonId
    module_id: ModuleId
    title: str
    order_index: int
    xp_reward: int = 0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.order_index < 1:
            raise ConfigurationError("Lesson order_index is 1-based", field="order_index")
        if self.xp_reward < 0:
            raise ConfigurationError("Lesson xp_reward cannot be negative", field="xp_reward")


@dataclass
class LearningModule(Entity[ModuleId]):
    """
    An ordered sequence of lessons with a completion bonus.

    Business Rules:
    - A module has at least one lesson
    - Lesson order indices run 1..n without gaps
    - xp_reward (the completion bonus) cannot be negative
    """

    id: ModuleId
    title: str
    xp_reward: int = 0
    lessons: list[Lesson] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.title or not self.title.strip():
            raise ConfigurationError("Module title cannot be empty", field="title")
        if self.xp_reward < 0:
            raise ConfigurationError("Module xp_reward cannot be negative", field="xp_reward")
        self.lessons = sorted(self.lessons, key=lambda lesson: lesson.order_index)
        indices = [lesson.order_index for lesson in self.lessons]
        if indices != list(range(1, len(indices) + 1)):
            raise ConfigurationError(
                "Lesson order indices must run 1..n without gaps or duplicates",
                field="lessons",
            )

    @property
    def lesson_ids(self) -> list[LessonId]:
        """Lesson ids in learning order."""
        return [lesson.id for lesson in self.lessons]

    def lesson(self, lesson_id: LessonId) -> Lesson | None:
        """Find a lesson of this module by id."""
        for lesson in self.lessons:
            if lesson.id == lesson_id:
                return lesson
        return None

    def successor_of(self, lesson_id: LessonId) -> Lesson | None:
        """Return the lesson that follows the given one, if any."""
        ids = self.lesson_ids
        position = ids.index(lesson_id)
        if position + 1 < len(self.lessons):
            return self.lessons[position + 1]
        return None

    @classmethod
    def create(
        cls,
        title: str,
        lessons: list[tuple[str, int]],
        xp_reward: int = 0,
    ) -> "LearningModule":
        """
        Create a new module from (title, xp_reward) pairs in learning order.

        Ids stay 0 until persisted.

        Raises:
            ConfigurationError: If the module has no lessons or any value is invalid
        """
        if not lessons:
            raise ConfigurationError("A module needs at least one lesson", field="lessons")
        module_id = ModuleId.generate()
        return cls(
            id=module_id,
            title=title.strip(),
            xp_reward=xp_reward,
            lessons=[
                Lesson(
                    id=LessonId.generate(),
                    module_id=module_id,
                    title=lesson_title.strip(),
                    order_index=position,
                    xp_reward=lesson_xp,
                )
                for position, (lesson_title, lesson_xp) in enumerate(lessons, start=1)
            ],
        )
