from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from squash_tracker.api.dependencies import get_current_user, get_user_service
from squash_tracker.models.user_model import UserModel
from squash_tracker.schemas import user_schemas
from squash_tracker.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=List[UserModel])
async def list_users(service: UserService = Depends(get_user_service)):
    return service.list_users()


@router.get("/{login}", response_model=UserModel)
async def get_user(login: str, service: UserService = Depends(get_user_service)):
    user = service.get_user(login)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{login}", response_model=UserModel)
async def update_user(
    login: str,
    user_in: user_schemas.UserUpdate,
    current_user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.update_profile(login, user_in.model_dump(exclude_unset=True), acting_user=current_user)


@router.get("/{login}/stats", response_model=user_schemas.UserStatsRead)
async def get_user_stats(login: str, service: UserService = Depends(get_user_service)):
    return user_schemas.UserStatsRead(**service.get_user_stats(login)._asdict())
