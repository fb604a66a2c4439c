from typing import List

from fastapi import APIRouter, Depends
from dependency_injector.wiring import inject, Provide

from leaderboard.containers import Container
from leaderboard.schemas.user import User as UserSchema
from leaderboard.services.leaderboard_service import LeaderboardService

router = APIRouter(tags=["rankings"])


@router.get("/rankings", response_model=List[UserSchema])
@inject
def get_rankings(
    leaderboard_service: LeaderboardService = Depends(
        Provide[Container.services.leaderboard_service]
    ),
) -> List[UserSchema]:
    """전체 사용자 랭킹 (포인트 내림차순)"""
    return leaderboard_service.get_rankings()
