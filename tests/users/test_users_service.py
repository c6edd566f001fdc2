"""
Testes para o serviço de usuários.
"""

import pytest
from datetime import date

from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.database.core import Base
from src.database.repository import Repository
from src.entities.order import Order
from src.entities.user import Gender, User
from src.exceptions.users import UserDeletionError, UserNotFoundError
from src.users import service


@pytest.fixture
async def fk_session_factory(tmp_path):
    """
    Banco SQLite com chaves estrangeiras ativas, como no PostgreSQL.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fk.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, expire_on_commit=False)

    await engine.dispose()


async def _create_buyer(session_factory) -> User:
    return await Repository(User, session_factory).create(
        id="buyer-uid",
        name="Buyer",
        email="buyer@example.com",
        image="/uploads/buyer.png",
        dob=date(1992, 3, 4),
        gender=Gender.MALE,
    )


async def test_delete_user_with_orders_is_rejected(fk_session_factory, cache, invalidator):
    buyer = await _create_buyer(fk_session_factory)
    await Repository(Order, fk_session_factory).create(
        user_id=buyer.id,
        address="Rua das Flores, 10",
        city="São Paulo",
        state="SP",
        country="Brasil",
        pin_code="01000-000",
        order_items=[],
        subtotal=0,
        total=0,
    )
    cache.set("admin-stats", b"{}")

    with pytest.raises(UserDeletionError) as excinfo:
        await service.delete_user(fk_session_factory, invalidator, buyer.id)

    assert excinfo.value.status_code == 400
    assert await Repository(User, fk_session_factory).find_by_id(buyer.id) is not None
    assert cache.has("admin-stats")


async def test_delete_user_without_orders(fk_session_factory, cache, invalidator):
    buyer = await _create_buyer(fk_session_factory)
    cache.set("admin-stats", b"{}")

    await service.delete_user(fk_session_factory, invalidator, buyer.id)

    assert await Repository(User, fk_session_factory).find_by_id(buyer.id) is None
    assert not cache.has("admin-stats")


async def test_delete_missing_user(fk_session_factory, invalidator):
    with pytest.raises(UserNotFoundError):
        await service.delete_user(fk_session_factory, invalidator, "nobody")
