from fastapi import APIRouter, Depends, status

from squash_tracker.api.dependencies import get_current_user, get_user_service
from squash_tracker.core.security import create_access_token
from squash_tracker.models.user_model import UserModel
from squash_tracker.schemas import auth_schemas
from squash_tracker.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=auth_schemas.Token, status_code=status.HTTP_201_CREATED)
async def register(
    payload: auth_schemas.RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    profile = {"club": payload.club} if payload.club else {}
    user = service.register(payload.login, payload.display_name, **profile)
    return auth_schemas.Token(access_token=create_access_token({"sub": user.login}), token_type="bearer")


@router.post("/login", response_model=auth_schemas.Token)
async def login(
    payload: auth_schemas.LoginRequest,
    service: UserService = Depends(get_user_service),
):
    user = service.login(payload.login)
    return auth_schemas.Token(access_token=create_access_token({"sub": user.login}), token_type="bearer")


@router.get("/me", response_model=UserModel)
async def read_current_user(current_user: UserModel = Depends(get_current_user)):
    return current_user
