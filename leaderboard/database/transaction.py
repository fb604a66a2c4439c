"""
명시적 트랜잭션 핸들

claim 처리처럼 여러 레코드를 한 번에 써야 하는 작업은 Transaction 안에서 수행한다.

    with Transaction(session_factory) as tx:
        ...  # tx.session 으로 읽기/쓰기
        tx.commit()

규칙:
- with 블록을 빠져나갈 때 커밋되지 않은 트랜잭션은 항상 롤백된다 (예외 여부와 무관)
- 세션은 항상 닫힌다
- max_lifetime_seconds 를 넘긴 트랜잭션은 커밋하지 않고 롤백한다
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from leaderboard.core.exceptions import TransactionError

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03"}
RETRYABLE_MESSAGES = (
    "database is locked",
    "database table is locked",
    "deadlock detected",
    "could not serialize access",
    "lock timeout",
    "could not obtain lock",
)


def is_retryable_conflict(error: OperationalError) -> bool:
    """잠금/직렬화 충돌만 재시도 대상으로 본다

    연결 끊김처럼 커밋 결과를 알 수 없는 오류는 재시도하면 같은 claim 이
    두 번 반영될 수 있으므로 제외한다.
    """
    if getattr(error.orig, "pgcode", None) in RETRYABLE_SQLSTATES:
        return True
    message = str(error.orig).lower()
    return any(text in message for text in RETRYABLE_MESSAGES)


class TransactionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMMITTED = "committed"
    ABORTED = "aborted"


class Transaction:
    def __init__(
        self,
        session_factory: sessionmaker,
        max_lifetime_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session_factory = session_factory
        self._max_lifetime_seconds = max_lifetime_seconds
        self._clock = clock
        self._started_at: Optional[float] = None
        self._session: Optional[Session] = None
        self.status = TransactionStatus.PENDING

    @property
    def session(self) -> Session:
        if self._session is None or self.status is not TransactionStatus.ACTIVE:
            raise TransactionError(f"Transaction is not active ({self.status.value})")
        return self._session

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def begin(self) -> "Transaction":
        if self.status is not TransactionStatus.PENDING:
            raise TransactionError(f"Transaction already {self.status.value}")
        self._session = self._session_factory()
        self._session.begin()
        self._started_at = self._clock()
        self.status = TransactionStatus.ACTIVE
        return self

    def commit(self) -> None:
        session = self.session

        if (
            self._max_lifetime_seconds is not None
            and self.elapsed_seconds > self._max_lifetime_seconds
        ):
            logger.warning(
                f"Transaction exceeded its lifetime ({self.elapsed_seconds:.2f}s > {self._max_lifetime_seconds}s), aborting"
            )
            self.abort()
            raise TransactionError("Transaction timed out")

        try:
            session.commit()
        except OperationalError as e:
            self.abort()
            if is_retryable_conflict(e):
                raise TransactionError("Transaction conflict", retryable=True) from e
            raise TransactionError("Transaction commit failed") from e
        except SQLAlchemyError as e:
            self.abort()
            raise TransactionError("Transaction commit failed") from e

        self.status = TransactionStatus.COMMITTED

    def abort(self) -> None:
        if self.status is not TransactionStatus.ACTIVE:
            return
        try:
            if self._session is not None:
                self._session.rollback()
        finally:
            self.status = TransactionStatus.ABORTED

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "Transaction":
        return self.begin()

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self.status is TransactionStatus.ACTIVE:
                if exc_type is None:
                    logger.warning("Transaction left scope without commit, aborting")
                self.abort()
        finally:
            self.close()
        return False
