from typing import Optional

from fastapi import APIRouter, Depends, status
from dependency_injector.wiring import inject, Provide

from leaderboard.containers import Container
from leaderboard.schemas.user import AddUserRequest, User as UserSchema
from leaderboard.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post(
    "/add-user", response_model=UserSchema, status_code=status.HTTP_201_CREATED
)
@inject
def add_user(
    request: Optional[AddUserRequest] = None,
    user_service: UserService = Depends(Provide[Container.services.user_service]),
) -> UserSchema:
    """
    사용자 등록

    HTTP Status:
        201: 생성된 사용자 (points=0)
        400: name 이 없거나 공백뿐인 경우
        500: 저장 실패
    """
    return user_service.register_user(request.name if request else None)


@router.get("/users/{user_id}", response_model=UserSchema)
@inject
def get_user(
    user_id: str,
    user_service: UserService = Depends(Provide[Container.services.user_service]),
) -> UserSchema:
    """사용자 ID로 조회"""
    return user_service.get_user(user_id)
