"""SQLAlchemy counter backend — implements CounterBackend."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from pingpong.adapters.persistence.database import Base
from pingpong.adapters.persistence.models import COUNTER_ROW_ID, PingCounterModel
from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.domain.errors import BackendUnavailable

logger = logging.getLogger(__name__)

# asyncpg surfaces refused/unreachable hosts as OSError and its own timeouts as
# asyncio.TimeoutError; everything else arrives wrapped by SQLAlchemy.
_DRIVER_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class SqlCounterBackend(CounterBackend):
    """Counter stored as a single row of ``ping_counter``."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def ping(self) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except _DRIVER_ERRORS as e:
            raise BackendUnavailable(f"Database ping failed: {e}") from e

    async def ensure_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            async with self._session_factory() as session:
                m = await session.get(PingCounterModel, COUNTER_ROW_ID)
                if m is not None:
                    logger.info("Found existing counter value: %d", m.counter_value)
                    return
                session.add(PingCounterModel(id=COUNTER_ROW_ID, counter_value=0))
                try:
                    await session.commit()
                except IntegrityError:
                    # Another replica inserted the row first
                    await session.rollback()
                    logger.info("Counter row created concurrently, keeping it")
                    return
                logger.info("Initialized counter to 0")
        except _DRIVER_ERRORS as e:
            raise BackendUnavailable(f"Failed to initialize counter table: {e}") from e

    async def read(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(PingCounterModel.counter_value).where(
                        PingCounterModel.id == COUNTER_ROW_ID
                    )
                )
                value = result.scalar_one_or_none()
        except _DRIVER_ERRORS as e:
            raise BackendUnavailable(f"Failed to read counter: {e}") from e
        return value if value is not None else 0

    async def increment_and_return(self) -> int:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(PingCounterModel)
                        .where(PingCounterModel.id == COUNTER_ROW_ID)
                        .with_for_update()
                    )
                    m = result.scalar_one_or_none()
                    if m is None:
                        logger.warning("Counter row missing, recreating it from 0")
                        session.add(PingCounterModel(id=COUNTER_ROW_ID, counter_value=1))
                        old_value = 0
                    else:
                        old_value = m.counter_value
                        m.counter_value = old_value + 1
        except _DRIVER_ERRORS as e:
            raise BackendUnavailable(f"Failed to increment counter: {e}") from e
        return old_value

    async def close(self) -> None:
        await self._engine.dispose()
