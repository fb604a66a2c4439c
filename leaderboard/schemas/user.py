from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="사용자 ID")
    name: str = Field(..., description="표시 이름")
    points: int = Field(..., ge=0, description="누적 포인트")


class AddUserRequest(BaseModel):
    """사용자 등록 요청 - 빈 값 검증은 서비스에서 400으로 처리"""

    name: Optional[str] = Field(None, description="표시 이름")
