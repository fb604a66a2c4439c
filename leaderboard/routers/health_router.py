from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from dependency_injector.wiring import inject, Provide
from sqlalchemy.orm import sessionmaker

from leaderboard.containers import Container
from leaderboard.database.session import check_database
from leaderboard.schemas.health import HealthCheckResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def hello() -> str:
    return "Hello, World!"


@router.get("/health", response_model=HealthCheckResponse)
@inject
def health_check(
    session_factory: sessionmaker = Depends(
        Provide[Container.database.session_factory]
    ),
) -> HealthCheckResponse:
    """Health check endpoint."""

    if check_database(session_factory):
        return HealthCheckResponse()
    return HealthCheckResponse(status="degraded", database="unavailable")
