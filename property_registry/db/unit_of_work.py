"""Transaction scope spanning several repository writes on one session."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from property_registry.exceptions import TransientStoreError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    TimeoutError,
    ConnectionError,
)


class UnitOfWork:
    """Begin/commit/rollback around a single ``AsyncSession``.

    Services open ``transaction()`` at the start of a mutation; the scope
    commits when the block exits normally and rolls back on any exception.
    Read paths open ``reading()`` instead. In both scopes connectivity
    failures and timeouts are re-raised as ``TransientStoreError``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def begin(self) -> None:
        if not self._session.in_transaction():
            await self._session.begin()

    async def save_changes(self) -> None:
        """Flush pending writes without ending the transaction."""

        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[UnitOfWork]:
        await self.begin()
        try:
            yield self
            await self.commit()
        except TRANSIENT_ERRORS as exc:
            await self._rollback_quietly()
            logger.warning("Transaction rolled back after store failure: %s", exc)
            raise TransientStoreError("Temporary database failure") from exc
        except Exception:
            await self._rollback_quietly()
            raise

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[UnitOfWork]:
        """Query scope: nothing is committed, store failures still surface
        as ``TransientStoreError``."""

        try:
            yield self
        except TRANSIENT_ERRORS as exc:
            await self._rollback_quietly()
            logger.warning("Query aborted after store failure: %s", exc)
            raise TransientStoreError("Temporary database failure") from exc

    async def _rollback_quietly(self) -> None:
        # A dead connection can fail the rollback too; the original error wins.
        try:
            await self.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback failed", exc_info=True)
