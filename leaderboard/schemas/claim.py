from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from leaderboard.schemas.user import User


class ClaimPointsRequest(BaseModel):
    """포인트 claim 요청"""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId", description="사용자 ID")


class ClaimResult(BaseModel):
    """claim 처리 결과 (서비스 레이어)"""

    user: User
    awarded_points: int = Field(..., gt=0)


class ClaimPointsResponse(BaseModel):
    user: User
    message: str = Field(..., description="예: '7 points awarded'")

    @classmethod
    def from_result(cls, result: ClaimResult) -> "ClaimPointsResponse":
        return cls(user=result.user, message=f"{result.awarded_points} points awarded")


class ClaimHistoryEntry(BaseModel):
    """claim 이력 항목 - 사용자의 현재 이름을 조인해서 반환"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    user_id: str = Field(..., alias="userId")
    user_name: Optional[str] = Field(None, alias="userName")
    points: int = Field(..., gt=0)
    timestamp: datetime
