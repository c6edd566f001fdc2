from typing import Annotated, Optional
from fastapi import Depends, Query
from src.database.core import SessionFactory
from src.database.repository import Repository
from src.entities.user import User
from ..exceptions.auth import AuthenticationError, AdminRequiredError
import logging


async def get_current_admin(
    session_factory: SessionFactory,
    id: Annotated[Optional[str], Query(description="ID of the requesting user")] = None,
) -> User:
    if not id:
        logging.warning("Rota de administrador acessada sem ID de usuário")
        raise AuthenticationError(message="Faça login primeiro")

    user = await Repository(User, session_factory).find_by_id(id)
    if not user:
        logging.warning(f"ID de usuário inválido na rota de administrador: {id}")
        raise AuthenticationError(message="ID de usuário inválido")

    if not user.is_admin:
        logging.warning(f"Usuário {id} sem privilégios tentou acessar rota de administrador")
        raise AdminRequiredError()
    return user


CurrentAdmin = Annotated[User, Depends(get_current_admin)]
