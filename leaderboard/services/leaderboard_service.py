from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from leaderboard.config import Settings
from leaderboard.core.exceptions import StorageError
from leaderboard.database.session import session_scope
from leaderboard.repositories.claim_history_repository import ClaimHistoryRepository
from leaderboard.repositories.user_repository import UserRepository
from leaderboard.schemas.claim import ClaimHistoryEntry
from leaderboard.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)


class LeaderboardService:
    """랭킹 / 최근 claim 이력 조회 서비스 (읽기 전용, 커밋된 상태만 반영)"""

    def __init__(self, session_factory: sessionmaker, settings: Settings):
        self.session_factory = session_factory
        self.settings = settings

    def get_rankings(self) -> List[UserSchema]:
        try:
            with session_scope(self.session_factory) as db:
                return UserRepository(db).list_by_points_desc()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch rankings: {str(e)}")
            raise StorageError("Error fetching rankings") from e

    def get_latest_claim_history(self, limit: Optional[int] = None) -> List[ClaimHistoryEntry]:
        if limit is None:
            limit = self.settings.HISTORY_LIMIT

        try:
            with session_scope(self.session_factory) as db:
                return ClaimHistoryRepository(db).list_recent(limit=limit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch latest claim history: {str(e)}")
            raise StorageError("Error fetching latest claim history") from e
