"""
Interface de consulta ao banco de documentos usada pelos serviços.

Cada chamada abre sua própria sessão, então várias leituras podem ser
disparadas em paralelo (ex.: ``asyncio.gather`` no dashboard) sem
compartilhar uma ``AsyncSession``.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Generic, Optional, Sequence, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.exceptions.database import DataSourceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class ConditionalUpdateError(Exception):
    """Um decremento condicional não encontrou saldo suficiente."""

    def __init__(self, entity_id: Any):
        super().__init__(entity_id)
        self.entity_id = entity_id


class Repository(Generic[ModelT]):
    def __init__(
        self, model: type[ModelT], session_factory: async_sessionmaker[AsyncSession]
    ):
        self.model = model
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except IntegrityError:
            # Constraint violations are translated by the calling service
            raise
        except SQLAlchemyError as e:
            logger.error(f"Falha de acesso à coleção {self.model.__name__}: {e}")
            raise DataSourceError() from e

    async def find(
        self,
        *filters: Any,
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> list[ModelT]:
        statement = select(self.model).filter(*filters)
        if order_by is not None:
            statement = statement.order_by(*order_by)
        if skip:
            statement = statement.offset(skip)
        if limit is not None:
            statement = statement.limit(limit)

        async with self._session() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def find_by_id(self, entity_id: Any) -> Optional[ModelT]:
        async with self._session() as session:
            return await session.get(self.model, entity_id)

    async def find_created_between(
        self, start: datetime, end: datetime, order_by: Optional[Sequence[Any]] = None
    ) -> list[ModelT]:
        """Both bounds are inclusive."""
        created_at = self.model.created_at
        return await self.find(created_at >= start, created_at <= end, order_by=order_by)

    async def count(self, *filters: Any) -> int:
        statement = select(func.count()).select_from(self.model).filter(*filters)
        async with self._session() as session:
            result = await session.execute(statement)
            return result.scalar_one()

    async def distinct(self, column: Any) -> list[Any]:
        statement = select(column).distinct().order_by(column)
        async with self._session() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def values(self, column: Any) -> list[Any]:
        """Selects a single field across every document of the collection."""
        async with self._session() as session:
            result = await session.execute(select(column))
            return list(result.scalars().all())

    async def create(self, **values: Any) -> ModelT:
        async with self._session() as session:
            entity = self.model(**values)
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
            return entity

    async def update_by_id(
        self, entity_id: Any, values: dict[str, Any]
    ) -> Optional[ModelT]:
        async with self._session() as session:
            entity = await session.get(self.model, entity_id)
            if entity is None:
                return None
            for field, value in values.items():
                setattr(entity, field, value)
            await session.commit()
            await session.refresh(entity)
            return entity

    async def delete_by_id(self, entity_id: Any) -> Optional[ModelT]:
        async with self._session() as session:
            entity = await session.get(self.model, entity_id)
            if entity is None:
                return None
            await session.delete(entity)
            await session.commit()
            return entity

    async def create_with_decrements(
        self, values: dict[str, Any], column: Any, amounts: dict[Any, int]
    ) -> ModelT:
        """
        Insere o documento e desconta ``amounts`` de ``column`` nos documentos
        indicados, tudo na mesma transação.

        Cada desconto só é aplicado se o saldo não ficar negativo; caso
        contrário nada é gravado e ``ConditionalUpdateError`` é levantado com o
        ID que faltou saldo.
        """
        target = column.class_
        async with self._session() as session:
            for entity_id, amount in amounts.items():
                result = await session.execute(
                    update(target)
                    .where(target.id == entity_id, column >= amount)
                    .values({column.key: column - amount})
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    await session.rollback()
                    raise ConditionalUpdateError(entity_id)

            entity = self.model(**values)
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
            return entity
