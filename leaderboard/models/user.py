import uuid

from sqlalchemy import BigInteger, CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from leaderboard.models.base import BaseModel

USER_NAME_MAX_LENGTH = 255


def new_user_id() -> str:
    return uuid.uuid4().hex


def validate_user_name(name) -> str:
    """표시 이름 검증 - 앞뒤 공백을 제거한 값을 반환"""
    if not isinstance(name, str):
        raise ValueError("Name must be a string")
    stripped = name.strip()
    if not stripped:
        raise ValueError("Name is required")
    if len(stripped) > USER_NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {USER_NAME_MAX_LENGTH} characters")
    return stripped


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        Index("idx_users_points_seq", "points", "seq"),
    )

    # 등록 순서 - 동점자 정렬 키 (SQLite는 INTEGER PRIMARY KEY 에서만 자동 증가)
    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, default=new_user_id
    )
    name: Mapped[str] = mapped_column(String(USER_NAME_MAX_LENGTH), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    @validates("name")
    def _validate_name(self, key, value):
        return validate_user_name(value)

    def __repr__(self):
        return f"<User(id={self.id}, name={self.name}, points={self.points})>"
