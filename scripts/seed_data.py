"""
데모용 사용자 시드 스크립트
기본 사용자들을 등록하고 몇 차례 포인트를 claim 한다
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import click

from leaderboard.config import get_settings
from leaderboard.database.connection import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from leaderboard.logging_config import setup_logging
from leaderboard.services.award_source import RandomAwardSource
from leaderboard.services.claim_service import ClaimService
from leaderboard.services.user_service import UserService

DEFAULT_NAMES = ["Ada", "Grace", "Linus", "Margaret", "Alan"]


@click.command()
@click.option("--claims", default=3, show_default=True, help="사용자당 claim 횟수")
@click.argument("names", nargs=-1)
def seed(claims: int, names):
    """사용자를 등록하고 claim 을 실행한다"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, "simple")

    engine = create_db_engine(settings)
    init_db(engine)
    session_factory = create_session_factory(engine)

    user_service = UserService(session_factory)
    claim_service = ClaimService(session_factory, RandomAwardSource(), settings)

    try:
        for name in names or DEFAULT_NAMES:
            user = user_service.register_user(name)
            for _ in range(claims):
                result = claim_service.claim_points(user.id)
                user = result.user
            click.echo(f"{user.name}: {user.points} points ({user.id})")
    finally:
        engine.dispose()


if __name__ == "__main__":
    seed()
