"""
Claim API 라우터

- POST /claim-points: 랜덤 포인트 지급 (잔액 갱신 + 이력 추가를 하나의 트랜잭션으로)
- GET /latest-claim-history: 최근 claim 10건 (최신순, 사용자 이름 포함)

엔드포인트는 동기 함수로 두어 threadpool 에서 실행한다. 클라이언트 연결이 끊겨도
진행 중인 트랜잭션은 커밋 또는 롤백으로 끝까지 처리된다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from dependency_injector.wiring import inject, Provide

from leaderboard.containers import Container
from leaderboard.schemas.claim import (
    ClaimHistoryEntry,
    ClaimPointsRequest,
    ClaimPointsResponse,
)
from leaderboard.services.claim_service import ClaimService
from leaderboard.services.leaderboard_service import LeaderboardService

router = APIRouter(tags=["claims"])


@router.post("/claim-points", response_model=ClaimPointsResponse)
@inject
def claim_points(
    request: Optional[ClaimPointsRequest] = None,
    claim_service: ClaimService = Depends(Provide[Container.services.claim_service]),
) -> ClaimPointsResponse:
    """
    포인트 claim

    HTTP Status:
        200: {user, message: "<N> points awarded"}
        400: userId 누락
        404: 사용자 없음
        500: 트랜잭션 실패
    """
    # 본문이 없거나 null 이면 userId 누락과 같이 400 으로 처리
    user_id = request.user_id if request else None
    result = claim_service.claim_points(user_id)
    return ClaimPointsResponse.from_result(result)


@router.get("/latest-claim-history", response_model=List[ClaimHistoryEntry])
@inject
def get_latest_claim_history(
    leaderboard_service: LeaderboardService = Depends(
        Provide[Container.services.leaderboard_service]
    ),
) -> List[ClaimHistoryEntry]:
    return leaderboard_service.get_latest_claim_history()
