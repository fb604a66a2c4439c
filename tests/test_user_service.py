from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from leaderboard.config import Settings
from leaderboard.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from leaderboard.database.connection import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from leaderboard.database.session import session_scope
from leaderboard.models.claim_history import ClaimHistory, validate_award_points
from leaderboard.models.user import User as UserModel, validate_user_name
from leaderboard.repositories.user_repository import UserRepository
from leaderboard.services.user_service import UserService


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'users.db'}"))
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def user_service(session_factory):
    return UserService(session_factory)


def _user_count(session_factory):
    with session_scope(session_factory) as db:
        return UserRepository(db).count()


class TestEntityValidation:
    """엔티티 검증 함수 테스트"""

    def test_user_name_is_trimmed(self):
        assert validate_user_name("  Ada  ") == "Ada"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n", None, 42])
    def test_invalid_user_names(self, name):
        with pytest.raises(ValueError):
            validate_user_name(name)

    def test_user_name_length_limit(self):
        assert validate_user_name("x" * 255) == "x" * 255
        with pytest.raises(ValueError):
            validate_user_name("x" * 256)

    def test_model_constructor_validates_name(self):
        assert UserModel(name=" Ada ").name == "Ada"
        with pytest.raises(ValueError):
            UserModel(name=" ")

    @pytest.mark.parametrize("points", [0, -1, 1.5, "3", True])
    def test_invalid_award_points(self, points):
        with pytest.raises(ValueError):
            validate_award_points(points)

    def test_model_constructor_validates_points(self):
        assert ClaimHistory(user_id="a" * 32, points=3).points == 3
        with pytest.raises(ValueError):
            ClaimHistory(user_id="a" * 32, points=0)


class TestUserService:
    """UserService 테스트"""

    def test_register_user_starts_at_zero(self, user_service):
        user = user_service.register_user("Ada")

        assert user.name == "Ada"
        assert user.points == 0
        assert len(user.id) == 32

    def test_register_user_trims_name(self, user_service):
        assert user_service.register_user("  Grace Hopper ").name == "Grace Hopper"

    def test_ids_are_unique(self, user_service):
        ids = {user_service.register_user("same").id for _ in range(5)}
        assert len(ids) == 5

    def test_missing_name_is_invalid_request(self, user_service, session_factory):
        with pytest.raises(InvalidRequestError) as exc_info:
            user_service.register_user(None)

        assert exc_info.value.status_code == 400
        assert _user_count(session_factory) == 0

    def test_blank_name_is_validation_error(self, user_service, session_factory):
        with pytest.raises(ValidationError) as exc_info:
            user_service.register_user("   ")

        assert exc_info.value.status_code == 400
        assert _user_count(session_factory) == 0

    def test_storage_fault_is_storage_error(self, user_service):
        with patch.object(
            UserRepository, "create_user", side_effect=SQLAlchemyError("disk I/O error")
        ):
            with pytest.raises(StorageError) as exc_info:
                user_service.register_user("Ada")

        assert exc_info.value.message == "Error adding user"

    def test_get_user(self, user_service):
        created = user_service.register_user("Linus")

        assert user_service.get_user(created.id) == created

    def test_get_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.get_user("missing")
