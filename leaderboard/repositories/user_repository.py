from typing import List, Optional

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from leaderboard.models.claim_history import validate_award_points
from leaderboard.models.user import User as UserModel
from leaderboard.schemas.user import User as UserSchema
from leaderboard.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """사용자 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def create_user(self, name: str) -> UserSchema:
        """사용자 생성 - 이름 검증 실패 시 ValueError"""
        instance = self.add(UserModel(name=name, points=0))
        return self._to_schema(instance)

    def get_for_update(self, user_id: str) -> Optional[UserModel]:
        """트랜잭션 안에서 사용자 행을 잠그고 조회 (SQLite는 FOR UPDATE 무시)"""
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.id == user_id)
            .with_for_update()
            .first()
        )

    def increment_points(self, user_id: str, delta: int) -> Optional[UserSchema]:
        """포인트를 DB 안에서 원자적으로 증가시키고 갱신된 사용자를 반환

        읽은 값에 더해 다시 쓰지 않고 `points = points + :delta` 로 갱신하므로
        동시에 커밋되는 claim 사이에서도 갱신이 유실되지 않는다.
        """
        delta = validate_award_points(delta)
        updated = (
            self.db.query(self.model_class)
            .filter(self.model_class.id == user_id)
            .update(
                {self.model_class.points: self.model_class.points + delta},
                synchronize_session=False,
            )
        )
        if updated == 0:
            return None

        instance = self.get_model_by_id(user_id)
        self.db.refresh(instance)
        return self._to_schema(instance)

    def list_by_points_desc(self) -> List[UserSchema]:
        """포인트 내림차순, 동점이면 먼저 등록된 사용자(seq) 우선"""
        model_instances = (
            self.db.query(self.model_class)
            .order_by(
                desc(self.model_class.points),
                asc(self.model_class.seq),
            )
            .all()
        )
        return self._to_schemas(model_instances)
