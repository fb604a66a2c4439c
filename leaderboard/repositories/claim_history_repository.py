"""
Claim 이력 리포지토리

핵심 특징:
- append 만 제공한다 (수정/삭제 없음)
- 최근 이력 조회 시 사용자 이름은 저장하지 않고 조회 시점에 조인한다
  (사용자가 없으면 user_name 은 None)
"""

from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from leaderboard.models.claim_history import ClaimHistory as ClaimHistoryModel
from leaderboard.models.user import User as UserModel
from leaderboard.schemas.claim import ClaimHistoryEntry
from leaderboard.repositories.base import BaseRepository


class ClaimHistoryRepository(BaseRepository[ClaimHistoryModel, ClaimHistoryEntry]):
    def __init__(self, db: Session):
        super().__init__(ClaimHistoryModel, ClaimHistoryEntry, db)

    def _to_entry(self, model_instance: ClaimHistoryModel, user_name) -> ClaimHistoryEntry:
        return ClaimHistoryEntry(
            id=model_instance.id,
            user_id=model_instance.user_id,
            user_name=user_name,
            points=model_instance.points,
            timestamp=model_instance.timestamp,
        )

    def append(self, user_id: str, points: int) -> ClaimHistoryEntry:
        """이력 추가 - timestamp 는 저장 시점에 컬럼 기본값으로 채워진다"""
        instance = self.add(self.model_class(user_id=user_id, points=points))
        return self._to_entry(instance, None)

    def list_recent(self, limit: int = 10) -> List[ClaimHistoryEntry]:
        """최근 이력 조회 (timestamp 내림차순, 같은 시각이면 나중에 추가된 것 우선)"""
        rows = (
            self.db.query(self.model_class, UserModel.name)
            .outerjoin(UserModel, UserModel.id == self.model_class.user_id)
            .order_by(desc(self.model_class.timestamp), desc(self.model_class.id))
            .limit(limit)
            .all()
        )
        return [self._to_entry(instance, user_name) for instance, user_name in rows]
