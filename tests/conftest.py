import pytest
import sys
import os
from contextlib import asynccontextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import AsyncGenerator

# Add project root to sys.path so we can import from main.py and src
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from httpx import AsyncClient, ASGITransport
from main import app
from src.database.core import Base, get_session_factory
from src.database.repository import Repository
from src.entities.order import Order
from src.entities.product import Product
from src.entities.user import User, UserRole, Gender
from src.utils.cache import CacheStore, get_cache
from src.utils.invalidation import CacheInvalidator


@pytest.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    File backed SQLite database for a test. Repository calls open their own
    sessions concurrently, so each needs its own connection.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )


@pytest.fixture(scope="function")
def cache() -> CacheStore:
    return CacheStore()


@pytest.fixture(scope="function")
def invalidator(cache) -> CacheInvalidator:
    return CacheInvalidator(cache)


@pytest.fixture(scope="function")
async def client(session_factory, cache):
    """
    Dependency override for the session factory and the cache, and AsyncClient creation.
    """
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cache] = lambda: cache

    # Disable lifespan to prevent main.py from creating tables on the real DB engine
    @asynccontextmanager
    async def noop_lifespan(app):
        yield

    original_lifespan = app.router.lifespan_context
    app.router.lifespan_context = noop_lifespan

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c

    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def products(session_factory) -> Repository[Product]:
    return Repository(Product, session_factory)


@pytest.fixture(scope="function")
def users(session_factory) -> Repository[User]:
    return Repository(User, session_factory)


@pytest.fixture(scope="function")
def orders(session_factory) -> Repository[Order]:
    return Repository(Order, session_factory)


@pytest.fixture(scope="function")
async def test_admin(users):
    """
    Creates an admin user and returns it.
    """
    return await users.create(
        id="admin-uid",
        name="Admin User",
        email="admin@example.com",
        image="/uploads/admin.png",
        role=UserRole.ADMIN,
        dob=date(1990, 5, 17),
        gender=Gender.OTHER,
    )


@pytest.fixture(scope="function")
async def test_user(users):
    """
    Creates a regular user and returns it.
    """
    return await users.create(
        id="user-uid",
        name="Test User",
        email="test@example.com",
        image="/uploads/user.png",
        dob=date(2000, 1, 1),
        gender=Gender.FEMALE,
    )


@pytest.fixture(scope="function")
def admin_params(test_admin):
    return {"id": test_admin.id}


@pytest.fixture(scope="function")
def make_product(products):
    async def _make_product(
        name: str = "Mechanical Keyboard",
        category: str = "electronics",
        price: str = "99.90",
        stock: int = 10,
        created_at: datetime | None = None,
    ) -> Product:
        values = dict(name=name, category=category, price=Decimal(price), stock=stock)
        if created_at is not None:
            values["created_at"] = created_at
        return await products.create(**values)

    return _make_product


@pytest.fixture(scope="function")
def make_order(orders):
    async def _make_order(
        user_id: str,
        total: str | None = "100.00",
        created_at: datetime | None = None,
    ) -> Order:
        values = dict(
            user_id=user_id,
            address="Rua das Flores, 10",
            city="São Paulo",
            state="SP",
            country="Brasil",
            pin_code="01000-000",
            order_items=[],
            subtotal=Decimal(total or 0),
            total=Decimal(total) if total is not None else None,
        )
        if created_at is not None:
            values["created_at"] = created_at
        return await orders.create(**values)

    return _make_order
