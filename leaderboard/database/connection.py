import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from leaderboard.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """pysqlite의 지연 BEGIN을 끄고 BEGIN IMMEDIATE로 쓰기 트랜잭션을 직렬화한다.

    SQLite는 행 잠금이 없으므로 동시에 같은 사용자에 대한 claim이 들어오면
    두 번째 writer가 첫 번째 커밋이 끝날 때까지 busy timeout 동안 대기한다.
    """

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(settings: Settings) -> Engine:
    """Build the SQLAlchemy engine for the configured database."""

    if settings.is_sqlite:
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG and settings.LOG_LEVEL.upper() == "DEBUG",
            connect_args={
                "check_same_thread": False,
                "timeout": settings.DB_BUSY_TIMEOUT_SECONDS,
            },
        )
        _enable_sqlite_immediate_transactions(engine)
    else:
        timeout_ms = int(settings.TRANSACTION_TIMEOUT_SECONDS * 1000)
        engine = create_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,  # 연결 유효성 검사
            pool_recycle=3600,  # 1시간마다 연결 재생성
            echo=settings.DEBUG and settings.LOG_LEVEL.upper() == "DEBUG",
            # 열린 채로 방치된 트랜잭션은 서버 측에서도 종료된다
            connect_args={
                "options": (
                    f"-c statement_timeout={timeout_ms}"
                    f" -c idle_in_transaction_session_timeout={timeout_ms}"
                )
            },
        )

    logger.info(f"Database engine created for dialect '{engine.dialect.name}'")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    # Use expire_on_commit=False so attributes stay readable after the
    # transaction that loaded them has committed.
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    from leaderboard.models.base import Base
    import leaderboard.models.user  # noqa: F401
    import leaderboard.models.claim_history  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
