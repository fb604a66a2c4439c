import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from dependency_injector import providers
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from leaderboard import containers
from leaderboard.config import Settings
from leaderboard.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from leaderboard.core.exceptions import BaseAPIException
from leaderboard.core.logging_middleware import LoggingMiddleware
from leaderboard.database.connection import init_db
from leaderboard.logging_config import setup_logging
from leaderboard.routers import (
    claim_router,
    health_router,
    ranking_router,
    user_router,
)

load_dotenv("leaderboard/.env")
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    container = containers.Container()
    if settings is not None:
        container.config.override(providers.Object(settings))
    settings = container.config()

    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = container.database.engine()
        if settings.AUTO_CREATE_TABLES:
            init_db(engine)
        logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
        yield
        engine.dispose()
        logger.info(f"{settings.APP_NAME} stopped")

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.container = container  # type: ignore

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=bool(settings.FRONTEND_URL),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(user_router.router)
    app.include_router(claim_router.router)
    app.include_router(ranking_router.router)

    return app


app = create_app()

handler = Mangum(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.container.config().PORT)  # type: ignore
