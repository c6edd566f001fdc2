from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from . import model
from src.database.repository import Repository
from src.entities.user import User
from src.exceptions.users import UserCreationError, UserDeletionError, UserNotFoundError
from src.utils.invalidation import CacheInvalidator, EntityKind, InvalidationRequest
import logging


def _users(session_factory: async_sessionmaker[AsyncSession]) -> Repository[User]:
    return Repository(User, session_factory)


async def register_user(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    new_user: model.NewUserRequest,
) -> Tuple[User, bool]:
    """
    Cadastra o usuário vindo do provedor de identidade.
    Retorna (usuário, criado); um ID já conhecido apenas devolve o cadastro existente.
    """
    users = _users(session_factory)
    user = await users.find_by_id(new_user.id)
    if user:
        logging.info(f"Usuário de ID {new_user.id} já cadastrado")
        return user, False

    try:
        user = await users.create(**new_user.model_dump())
    except IntegrityError:
        logging.error(f"Falha ao registrar o usuario: {new_user.email}")
        raise UserCreationError(f"Já existe um usuário com o email {new_user.email}.")

    invalidator.invalidate(InvalidationRequest(EntityKind.USER, user.id))
    logging.info(f"Novo usuário registrado: {user.email}")
    return user, True


async def get_users(session_factory: async_sessionmaker[AsyncSession]) -> List[User]:
    users = await _users(session_factory).find(order_by=[User.created_at.desc()])
    logging.info("Recuperado todos os usuários")
    return users


async def get_user_by_id(
    session_factory: async_sessionmaker[AsyncSession], user_id: str
) -> User:
    user = await _users(session_factory).find_by_id(user_id)
    if not user:
        logging.warning(f"Usuario com ID {user_id} não encontrado")
        raise UserNotFoundError(user_id)
    logging.info(f"Sucesso ao encontrar usuario de ID: {user_id}")
    return user


async def delete_user(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    user_id: str,
) -> None:
    try:
        deleted_user = await _users(session_factory).delete_by_id(user_id)
    except IntegrityError:
        logging.warning(f"Usuario com ID {user_id} possui pedidos vinculados")
        raise UserDeletionError(user_id)
    if not deleted_user:
        logging.warning(f"Usuario com ID {user_id} não encontrado para exclusão")
        raise UserNotFoundError(user_id)

    invalidator.invalidate(InvalidationRequest(EntityKind.USER, user_id))
    logging.info(f"Usuário de ID {user_id} foi excluído")
