"""
TechNotes Backend — SQLAlchemy Repository
===========================================

What:  Repository implementation over an async SQLAlchemy session.
How:   One instance per model per request, all sharing the request's session.
       Writes flush immediately so generated ids and constraint violations
       show up inside the service call; the commit happens when the request's
       session scope exits (technotes.database.session_scope).

Concurrency:
    An AsyncSession refuses concurrent operations, but the notes list resolves
    usernames with asyncio.gather. Every repository bound to the same session
    therefore shares one asyncio.Lock stored in `session.info`, which turns
    the concurrent lookups into a queue on that session.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Type
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.exceptions import ConflictError, StorePersistenceError
from technotes.repositories.base import ModelType, Repository

logger = logging.getLogger(__name__)

_LOCK_KEY = "technotes.session_lock"


class SQLAlchemyRepository(Repository[ModelType]):
    """
    CRUD primitives for one model type on a shared AsyncSession.

    Args:
        session: The request-scoped session
        model: ORM class this repository reads and writes
        conflict_message: Message for a unique-index violation at write time
    """

    def __init__(
        self,
        session: AsyncSession,
        model: Type[ModelType],
        conflict_message: str = "Duplicate record",
    ):
        self.session = session
        self.model = model
        self.conflict_message = conflict_message

    @property
    def _lock(self) -> asyncio.Lock:
        return self.session.info.setdefault(_LOCK_KEY, asyncio.Lock())

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[ModelType]:
        stmt = select(self.model).order_by(self.model.created_at)
        async with self._lock:
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def find_by_id(self, record_id: UUID) -> Optional[ModelType]:
        async with self._lock:
            return await self.session.get(self.model, record_id)

    async def find_one(self, **criteria: Any) -> Optional[ModelType]:
        stmt = select(self.model).filter_by(**criteria).limit(1)
        async with self._lock:
            result = await self.session.execute(stmt)
            return result.scalars().first()

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, values: Dict[str, Any]) -> ModelType:
        record = self.model(**values)
        async with self._lock:
            self.session.add(record)
            await self._flush("create")
        return record

    async def save(self, record: ModelType) -> ModelType:
        async with self._lock:
            self.session.add(record)
            await self._flush("save")
        return record

    async def delete_one(self, record: ModelType) -> ModelType:
        async with self._lock:
            await self.session.delete(record)
            await self._flush("delete")
        return record

    async def _flush(self, operation: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Unique index caught a duplicate that slipped past the read-then-write check
            logger.warning(
                "Unique constraint violated on %s %s: %s",
                operation, self.resource_name, e.orig,
            )
            raise ConflictError(
                message=self.conflict_message,
                context={"operation": operation, "model": self.resource_name},
            )
        except SQLAlchemyError as e:
            logger.error(
                "Store failed to %s %s: %s", operation, self.resource_name, e,
                exc_info=True,
            )
            raise StorePersistenceError(
                message=f"Invalid {self.resource_name.lower()} data received",
                context={"operation": operation, "error_type": type(e).__name__},
            )
