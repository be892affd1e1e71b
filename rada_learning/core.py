from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.learner_activity_service import (
    LearnerActivityService,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.challenge_use_case import ChallengeUseCase
from rada_learning.application.learning.use_cases.community_use_case import (
    CommunityActivityUseCase,
)
from rada_learning.application.learning.use_cases.content_use_case import ContentUseCase
from rada_learning.application.learning.use_cases.event_ingestion_use_case import (
    EventIngestionUseCase,
)
from rada_learning.application.learning.use_cases.learner_progress_use_case import (
    LearnerProgressUseCase,
)
from rada_learning.application.learning.use_cases.progression_use_case import ProgressionUseCase
from rada_learning.application.learning.use_cases.quiz_attempt_use_case import (
    QuizAttemptUseCase,
)
from rada_learning.config import get_settings
from rada_learning.infrastructure.common.learner_locks import LearnerLockRegistry
from rada_learning.infrastructure.common.unit_of_work import SQLAlchemyUnitOfWork
from rada_learning.infrastructure.learning.repositories.badge_repository import (
    BadgeAwardRepository,
    BadgeRepository,
)
from rada_learning.infrastructure.learning.repositories.challenge_repository import (
    ChallengeRepository,
    ParticipationRepository,
)
from rada_learning.infrastructure.learning.repositories.content_repository import (
    ModuleRepository,
    QuizRepository,
)
from rada_learning.infrastructure.learning.repositories.learner_repository import (
    LearnerRepository,
    LearnerStatsRepository,
)
from rada_learning.infrastructure.learning.repositories.module_progress_repository import (
    ModuleProgressRepository,
)
from rada_learning.infrastructure.learning.repositories.quiz_attempt_repository import (
    QuizAttemptRepository,
)
from rada_learning.infrastructure.learning.repositories.xp_ledger_repository import (
    XPLedgerRepository,
)
from rada_learning.utils import utc_now


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare db as a dependency that will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    # Tests override this with a fixed or steppable clock
    clock = providers.Object(utc_now)

    settings = providers.Callable(get_settings)

    # Process-wide, shared by every request
    learner_locks = providers.Singleton(LearnerLockRegistry)

    uow = providers.Factory(
        SQLAlchemyUnitOfWork, db=db, learner_locks=learner_locks, settings=settings
    )

    # Repositories
    learner_repository = providers.Factory(LearnerRepository, db=db)
    learner_stats_repository = providers.Factory(LearnerStatsRepository, db=db)
    module_repository = providers.Factory(ModuleRepository, db=db)
    quiz_repository = providers.Factory(QuizRepository, db=db)
    module_progress_repository = providers.Factory(ModuleProgressRepository, db=db)
    quiz_attempt_repository = providers.Factory(QuizAttemptRepository, db=db)
    xp_ledger_repository = providers.Factory(XPLedgerRepository, db=db)
    badge_repository = providers.Factory(BadgeRepository, db=db)
    badge_award_repository = providers.Factory(BadgeAwardRepository, db=db)
    challenge_repository = providers.Factory(ChallengeRepository, db=db)
    participation_repository = providers.Factory(ParticipationRepository, db=db)

    # Application services
    xp_ledger_service = providers.Factory(
        XPLedgerService, xp_ledger_repository=xp_ledger_repository, clock=clock
    )
    learner_activity_service = providers.Factory(
        LearnerActivityService, learner_repository=learner_repository
    )
    badge_evaluator_service = providers.Factory(
        BadgeRuleEvaluatorService,
        badge_repository=badge_repository,
        badge_award_repository=badge_award_repository,
        stats_repository=learner_stats_repository,
        xp_ledger_service=xp_ledger_service,
        clock=clock,
    )

    # Learning module, application use cases
    progression_use_case = providers.Factory(
        ProgressionUseCase,
        uow=uow,
        module_repository=module_repository,
        module_progress_repository=module_progress_repository,
        xp_ledger_service=xp_ledger_service,
        learner_activity_service=learner_activity_service,
        badge_evaluator_service=badge_evaluator_service,
        clock=clock,
    )
    quiz_attempt_use_case = providers.Factory(
        QuizAttemptUseCase,
        uow=uow,
        quiz_repository=quiz_repository,
        quiz_attempt_repository=quiz_attempt_repository,
        xp_ledger_service=xp_ledger_service,
        learner_activity_service=learner_activity_service,
        badge_evaluator_service=badge_evaluator_service,
        clock=clock,
    )
    challenge_use_case = providers.Factory(
        ChallengeUseCase,
        uow=uow,
        challenge_repository=challenge_repository,
        participation_repository=participation_repository,
        badge_repository=badge_repository,
        xp_ledger_service=xp_ledger_service,
        learner_activity_service=learner_activity_service,
        badge_evaluator_service=badge_evaluator_service,
        clock=clock,
    )
    community_use_case = providers.Factory(
        CommunityActivityUseCase,
        uow=uow,
        learner_repository=learner_repository,
        learner_activity_service=learner_activity_service,
        badge_evaluator_service=badge_evaluator_service,
        clock=clock,
    )
    event_ingestion_use_case = providers.Factory(
        EventIngestionUseCase,
        progression_use_case=progression_use_case,
        quiz_attempt_use_case=quiz_attempt_use_case,
        challenge_use_case=challenge_use_case,
        community_use_case=community_use_case,
    )
    content_use_case = providers.Factory(
        ContentUseCase,
        uow=uow,
        module_repository=module_repository,
        quiz_repository=quiz_repository,
        badge_repository=badge_repository,
        challenge_repository=challenge_repository,
    )
    learner_progress_use_case = providers.Factory(
        LearnerProgressUseCase,
        module_repository=module_repository,
        module_progress_repository=module_progress_repository,
        learner_repository=learner_repository,
        badge_repository=badge_repository,
        badge_award_repository=badge_award_repository,
        xp_ledger_service=xp_ledger_service,
        badge_evaluator_service=badge_evaluator_service,
        clock=clock,
        xp_per_level=settings.provided.XP_PER_LEVEL,
        activity_window_days=settings.provided.ACTIVITY_WINDOW_DAYS,
    )


container = Container()
