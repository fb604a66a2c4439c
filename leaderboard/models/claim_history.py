"""
Claim 이력 데이터 모델

claim 한 건이 성공할 때마다 정확히 한 행이 추가되는 append-only 감사 로그입니다.
한번 생성된 레코드는 수정/삭제되지 않습니다.
"""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from leaderboard.models.base import Base, utcnow


def validate_award_points(points) -> int:
    """지급 포인트 검증 - 양의 정수만 허용"""
    if isinstance(points, bool) or not isinstance(points, int):
        raise ValueError("Points must be an integer")
    if points <= 0:
        raise ValueError("Points must be positive")
    return points


class ClaimHistory(Base):
    __tablename__ = "claim_history"
    __table_args__ = (
        CheckConstraint("points > 0", name="ck_claim_history_points_positive"),
        Index("idx_claim_history_timestamp", "timestamp", "id"),
    )

    # SQLite는 INTEGER PRIMARY KEY 에서만 자동 증가
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    # 약한 참조 - 이력은 사용자 레코드를 소유하지 않으므로 FK 제약을 두지 않는다
    user_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    points: Mapped[int] = mapped_column(Integer, nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    @validates("points")
    def _validate_points(self, key, value):
        return validate_award_points(value)

    def __repr__(self):
        return f"<ClaimHistory(id={self.id}, user_id={self.user_id}, points={self.points})>"
