from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from leaderboard.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from leaderboard.database.session import session_scope
from leaderboard.models.user import validate_user_name
from leaderboard.repositories.user_repository import UserRepository
from leaderboard.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)


class UserService:
    """사용자 등록/조회 서비스"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def register_user(self, name: Optional[str]) -> UserSchema:
        """사용자 등록

        Args:
            name: 표시 이름 (앞뒤 공백 제거 후 저장)

        Returns:
            UserSchema: 생성된 사용자 (points=0)

        Raises:
            InvalidRequestError: name 이 없는 경우
            ValidationError: 공백뿐이거나 너무 긴 경우
            StorageError: 저장 실패
        """
        if name is None:
            raise InvalidRequestError("Name is required")

        # 트랜잭션을 열기 전에 검증
        try:
            name = validate_user_name(name)
        except ValueError as e:
            raise ValidationError(str(e))

        try:
            with session_scope(self.session_factory) as db:
                user = UserRepository(db).create_user(name)
        except SQLAlchemyError as e:
            logger.error(f"Failed to add user: {str(e)}")
            raise StorageError("Error adding user") from e

        logger.info(f"Registered user {user.id}")
        return user

    def get_user(self, user_id: str) -> UserSchema:
        try:
            with session_scope(self.session_factory) as db:
                user = UserRepository(db).get_by_id(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch user {user_id}: {str(e)}")
            raise StorageError("Error fetching user") from e

        if user is None:
            raise NotFoundError("User not found")
        return user
