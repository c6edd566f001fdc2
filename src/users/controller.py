from fastapi import APIRouter, Response, status
from typing import List

from ..database.core import SessionFactory
from ..auth.service import CurrentAdmin
from ..utils.invalidation import Invalidator
from . import model
from . import service

router = APIRouter(prefix="/api/v1/user", tags=["Users"])


@router.post(
    "/new", response_model=model.NewUserResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    new_user: model.NewUserRequest,
    response: Response,
):
    user, created = await service.register_user(session_factory, invalidator, new_user)
    user = model.UserResponse.model_validate(user)
    if not created:
        response.status_code = status.HTTP_200_OK
        return model.NewUserResponse(message=f"Bem-vindo de volta, {user.name}!", user=user)
    return model.NewUserResponse(
        message=f"Bem-vindo, {user.name}! Sua conta foi criada com sucesso!", user=user
    )


@router.get("/all", response_model=List[model.UserResponse])
async def get_users(session_factory: SessionFactory, current_admin: CurrentAdmin):
    return await service.get_users(session_factory)


@router.get("/{user_id}", response_model=model.UserResponse)
async def get_user(session_factory: SessionFactory, user_id: str):
    return await service.get_user_by_id(session_factory, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    user_id: str,
    current_admin: CurrentAdmin,
):
    await service.delete_user(session_factory, invalidator, user_id)
