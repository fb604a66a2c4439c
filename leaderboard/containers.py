from dependency_injector import containers, providers

from leaderboard.config import Settings, get_settings
from leaderboard.database.connection import create_db_engine, create_session_factory
from leaderboard.services.award_source import RandomAwardSource
from leaderboard.services.claim_service import ClaimService
from leaderboard.services.leaderboard_service import LeaderboardService
from leaderboard.services.user_service import UserService


class DatabaseModule(containers.DeclarativeContainer):
    """Engine and session factory, built once per container."""

    config = providers.Dependency(instance_of=Settings)

    engine = providers.Singleton(create_db_engine, settings=config)
    session_factory = providers.Singleton(create_session_factory, engine=engine)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.Dependency(instance_of=Settings)
    database = providers.DependenciesContainer()

    award_source = providers.Singleton(RandomAwardSource)

    user_service = providers.Factory(
        UserService, session_factory=database.session_factory
    )
    claim_service = providers.Factory(
        ClaimService,
        session_factory=database.session_factory,
        award_source=award_source,
        settings=config,
    )
    leaderboard_service = providers.Factory(
        LeaderboardService, session_factory=database.session_factory, settings=config
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "leaderboard.routers.health_router",
            "leaderboard.routers.user_router",
            "leaderboard.routers.claim_router",
            "leaderboard.routers.ranking_router",
        ],
    )

    config = providers.Singleton(get_settings)
    database = providers.Container(DatabaseModule, config=config)
    services = providers.Container(ServiceModule, config=config, database=database)
