"""DTOs for progression use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from rada_learning.domain.learning.entities.badge import Badge
from rada_learning.domain.learning.entities.module_progress import ModuleProgress


@dataclass
class ModuleStartResult:
    """DTO for a module the learner has started."""

    progress: ModuleProgress
    duplicate: bool


@dataclass
class LessonCompletionResult:
    """DTO for a completed lesson and everything its completion triggered."""

    lesson_id: int
    module_id: int
    completed_at: datetime
    duplicate: bool
    xp_awarded: int = 0
    unlocked_lesson_id: int | None = None
    module_completed: bool = False
    module_xp_awarded: int = 0
    badges_awarded: list[Badge] = field(default_factory=list)
