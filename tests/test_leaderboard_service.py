from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from leaderboard.config import Settings
from leaderboard.core.exceptions import StorageError
from leaderboard.database.connection import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from leaderboard.database.session import session_scope
from leaderboard.models.claim_history import ClaimHistory
from leaderboard.models.user import User as UserModel
from leaderboard.repositories.user_repository import UserRepository
from leaderboard.services.claim_service import ClaimService
from leaderboard.services.leaderboard_service import LeaderboardService


class SequenceAwardSource:
    def __init__(self, values):
        self._values = list(values)

    def draw(self, low, high):
        return self._values.pop(0)


@pytest.fixture
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'leaderboard.db'}")


@pytest.fixture
def session_factory(settings):
    engine = create_db_engine(settings)
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def leaderboard_service(session_factory, settings):
    return LeaderboardService(session_factory, settings)


def _create_user(session_factory, name, points=0):
    with session_scope(session_factory) as db:
        repo = UserRepository(db)
        user = repo.create_user(name)
        if points:
            user = repo.increment_points(user.id, points)
        return user


class TestRankings:
    """랭킹 조회 테스트"""

    def test_rankings_sorted_by_points_desc(self, session_factory, leaderboard_service):
        for name, points in [("A", 5), ("B", 1), ("C", 9)]:
            _create_user(session_factory, name, points)

        rankings = leaderboard_service.get_rankings()

        assert [u.points for u in rankings] == [9, 5, 1]
        assert [u.name for u in rankings] == ["C", "A", "B"]

    def test_ties_keep_insertion_order(self, session_factory, leaderboard_service):
        first = _create_user(session_factory, "first", 3)
        second = _create_user(session_factory, "second", 3)
        zero = _create_user(session_factory, "zero")

        rankings = leaderboard_service.get_rankings()

        assert [u.id for u in rankings] == [first.id, second.id, zero.id]

    def test_ties_ignore_registration_clock(self, session_factory, leaderboard_service):
        """같은 시각(또는 역전된 시각)에 등록돼도 등록 순서를 유지한다"""
        users = [_create_user(session_factory, name, 4) for name in ["a", "b", "c", "d"]]
        same_tick = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with session_scope(session_factory) as db:
            db.query(UserModel).update({UserModel.created_at: same_tick})
            db.query(UserModel).filter(UserModel.id == users[-1].id).update(
                {UserModel.created_at: same_tick - timedelta(days=1)}
            )

        rankings = leaderboard_service.get_rankings()

        assert [u.id for u in rankings] == [u.id for u in users]

    def test_empty_rankings(self, leaderboard_service):
        assert leaderboard_service.get_rankings() == []

    def test_storage_fault_raises_storage_error(self, leaderboard_service):
        with patch.object(
            UserRepository, "list_by_points_desc", side_effect=SQLAlchemyError("gone")
        ):
            with pytest.raises(StorageError) as exc_info:
                leaderboard_service.get_rankings()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Error fetching rankings"


class TestLatestClaimHistory:
    """최근 claim 이력 조회 테스트"""

    def test_history_is_newest_first(self, session_factory, settings, leaderboard_service):
        user = _create_user(session_factory, "Ada")
        service = ClaimService(session_factory, SequenceAwardSource([1, 2, 3]), settings)
        for _ in range(3):
            service.claim_points(user.id)

        history = leaderboard_service.get_latest_claim_history()

        assert [h.points for h in history] == [3, 2, 1]
        assert all(h.user_name == "Ada" for h in history)
        assert all(h.user_id == user.id for h in history)

    def test_history_orders_by_timestamp_not_insert_order(self, session_factory, leaderboard_service):
        user = _create_user(session_factory, "Linus")
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with session_scope(session_factory) as db:
            db.add(ClaimHistory(user_id=user.id, points=2, timestamp=base + timedelta(minutes=2)))
            db.add(ClaimHistory(user_id=user.id, points=3, timestamp=base + timedelta(minutes=3)))
            db.add(ClaimHistory(user_id=user.id, points=1, timestamp=base + timedelta(minutes=1)))

        history = leaderboard_service.get_latest_claim_history()

        assert [h.points for h in history] == [3, 2, 1]

    def test_history_is_capped_at_limit(self, session_factory, settings, leaderboard_service):
        user = _create_user(session_factory, "Grace")
        awards = list(range(1, 11)) + [4, 4]
        service = ClaimService(session_factory, SequenceAwardSource(awards), settings)
        for _ in range(len(awards)):
            service.claim_points(user.id)

        history = leaderboard_service.get_latest_claim_history()

        assert len(history) == settings.HISTORY_LIMIT == 10
        assert [h.points for h in history[:3]] == [4, 4, 10]

    def test_history_for_missing_user_has_no_name(self, session_factory, leaderboard_service):
        """사용자 레코드가 없어도 이력은 남고 이름만 비어 있다"""
        with session_scope(session_factory) as db:
            db.add(ClaimHistory(user_id="f" * 32, points=5))

        history = leaderboard_service.get_latest_claim_history()

        assert len(history) == 1
        assert history[0].user_name is None
        assert history[0].user_id == "f" * 32
