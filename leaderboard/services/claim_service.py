"""
포인트 claim 서비스

claim 한 건은 다음 상태를 순서대로 거친다:

    STARTED -> VALIDATED -> BALANCE_UPDATED -> HISTORY_APPENDED -> COMMITTED

커밋 전 어느 단계에서든 실패하면 ABORTED 로 끝나며, 잔액 갱신과 이력 추가가
함께 롤백된다. 지급 포인트는 claim 당 한 번만 뽑고, 잔액 갱신과 이력 레코드
(그리고 재시도)에 같은 값을 사용한다.
"""

from enum import Enum
from typing import Optional
import logging

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from leaderboard.config import Settings
from leaderboard.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    StorageError,
    TransactionError,
)
from leaderboard.database.transaction import Transaction
from leaderboard.models.claim_history import validate_award_points
from leaderboard.repositories.claim_history_repository import ClaimHistoryRepository
from leaderboard.repositories.user_repository import UserRepository
from leaderboard.schemas.claim import ClaimResult
from leaderboard.services.award_source import AwardSource

logger = logging.getLogger(__name__)


class ClaimState(str, Enum):
    STARTED = "started"
    VALIDATED = "validated"
    BALANCE_UPDATED = "balance_updated"
    HISTORY_APPENDED = "history_appended"
    COMMITTED = "committed"
    ABORTED = "aborted"


class ClaimService:
    """포인트 claim 비즈니스 로직"""

    def __init__(
        self,
        session_factory: sessionmaker,
        award_source: AwardSource,
        settings: Settings,
    ):
        self.session_factory = session_factory
        self.award_source = award_source
        self.settings = settings

    def draw_award(self) -> int:
        award = self.award_source.draw(
            self.settings.CLAIM_MIN_POINTS, self.settings.CLAIM_MAX_POINTS
        )
        award = validate_award_points(award)
        if not self.settings.CLAIM_MIN_POINTS <= award <= self.settings.CLAIM_MAX_POINTS:
            raise ValueError(f"Award {award} is out of range")
        return award

    def claim_points(self, user_id: Optional[str]) -> ClaimResult:
        """포인트 claim

        Args:
            user_id: 사용자 ID

        Returns:
            ClaimResult: 갱신된 사용자와 지급 포인트

        Raises:
            InvalidRequestError: user_id 가 비어 있음 (트랜잭션을 열지 않음)
            NotFoundError: 사용자가 없음
            StorageError: 사용자 조회 중 저장소 오류
            TransactionError: 갱신/커밋 실패 (재시도 소진 포함)
        """
        if user_id is None or not str(user_id).strip():
            raise InvalidRequestError("User ID is required")
        user_id = str(user_id).strip()

        award = self.draw_award()
        max_attempts = max(1, self.settings.CLAIM_MAX_RETRIES + 1)

        for attempt in range(1, max_attempts + 1):
            try:
                result = self._claim_once(user_id, award)
            except StorageError as e:
                if not e.retryable or attempt >= max_attempts:
                    raise
                logger.warning(
                    f"Retrying claim for user {user_id} after conflict (attempt {attempt}/{max_attempts}): {e.message}"
                )
                continue

            logger.info(f"{award} points awarded to user {user_id}")
            return result

        # range 가 최소 1회는 돌기 때문에 도달하지 않음
        raise TransactionError("Claim was not attempted")

    def _claim_once(self, user_id: str, award: int) -> ClaimResult:
        state = ClaimState.STARTED
        try:
            with Transaction(
                self.session_factory,
                max_lifetime_seconds=self.settings.TRANSACTION_TIMEOUT_SECONDS,
            ) as tx:
                users = UserRepository(tx.session)
                history = ClaimHistoryRepository(tx.session)

                try:
                    user = users.get_for_update(user_id)
                except SQLAlchemyError as e:
                    raise StorageError(
                        "Error looking up user",
                        retryable=isinstance(e, OperationalError),
                    ) from e

                if user is None:
                    tx.abort()
                    raise NotFoundError("User not found")
                state = ClaimState.VALIDATED

                try:
                    updated_user = users.increment_points(user_id, award)
                    if updated_user is None:
                        raise TransactionError("User disappeared during claim")
                    state = ClaimState.BALANCE_UPDATED

                    history.append(user_id, award)
                    state = ClaimState.HISTORY_APPENDED
                except OperationalError as e:
                    raise TransactionError("Transaction conflict", retryable=True) from e
                except SQLAlchemyError as e:
                    raise TransactionError("Error claiming points") from e

                tx.commit()
                state = ClaimState.COMMITTED
        except NotFoundError:
            logger.warning(f"Claim aborted, user {user_id} not found")
            raise
        except Exception as e:
            logger.error(
                f"Error during claim-points operation for user {user_id}: {state.value} -> {ClaimState.ABORTED.value}: {type(e).__name__}: {str(e)}"
            )
            raise

        return ClaimResult(user=updated_user, awarded_points=award)
