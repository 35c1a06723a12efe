"""
TechNotes Backend — In-Memory Repository
==========================================

What:  Process-local Repository used by the test suite and by STORE_BACKEND=memory.
How:   Records live in a dict keyed by id. Every read hands out a detached
       copy and every write stores a copy, so a service mutating a record it
       fetched changes nothing until it calls save(), the same as the SQL store
       between flushes.

Unique fields are enforced at write time the way the SQL unique indexes are,
raising ConflictError with the configured message.
"""

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type
from uuid import UUID

from sqlalchemy import inspect

from technotes.exceptions import ConflictError, StorePersistenceError
from technotes.repositories.base import ModelType, Repository

logger = logging.getLogger(__name__)


class InMemoryRepository(Repository[ModelType]):
    """
    Dict-backed Repository for a single model type.

    Args:
        model: ORM class whose instances are stored (used transiently, never attached)
        unique_fields: Attribute names that must not repeat across records
        conflict_message: Message raised when a unique field is already taken
    """

    def __init__(
        self,
        model: Type[ModelType],
        unique_fields: Iterable[str] = (),
        conflict_message: str = "Duplicate record",
    ):
        self.model = model
        self.unique_fields = tuple(unique_fields)
        self.conflict_message = conflict_message
        self._records: Dict[UUID, ModelType] = {}
        self._attrs = [attr for attr in inspect(model).column_attrs]

    def __len__(self) -> int:
        return len(self._records)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[ModelType]:
        return [self._copy(record) for record in self._records.values()]

    async def find_by_id(self, record_id: UUID) -> Optional[ModelType]:
        record = self._records.get(record_id)
        return self._copy(record) if record is not None else None

    async def find_one(self, **criteria: Any) -> Optional[ModelType]:
        for record in self._records.values():
            if all(getattr(record, key) == value for key, value in criteria.items()):
                return self._copy(record)
        return None

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, values: Dict[str, Any]) -> ModelType:
        record = self.model(**values)
        self._apply_defaults(record)
        if record.id is None:
            record.id = uuid.uuid4()
        if record.id in self._records:
            raise StorePersistenceError(
                message=f"Invalid {self.resource_name.lower()} data received",
                context={"operation": "create", "reason": "id already exists"},
            )
        self._check_unique(record)
        self._records[record.id] = self._copy(record)
        return record

    async def save(self, record: ModelType) -> ModelType:
        if record.id not in self._records:
            logger.warning("Save of missing %s %s", self.resource_name, record.id)
            raise StorePersistenceError(
                message=f"Invalid {self.resource_name.lower()} data received",
                context={"operation": "save", "reason": "record no longer exists"},
            )
        self._check_unique(record)
        if hasattr(record, "updated_at"):
            record.updated_at = datetime.now(timezone.utc)
        self._records[record.id] = self._copy(record)
        return record

    async def delete_one(self, record: ModelType) -> ModelType:
        removed = self._records.pop(record.id, None)
        if removed is None:
            raise StorePersistenceError(
                message=f"Invalid {self.resource_name.lower()} data received",
                context={"operation": "delete", "reason": "record no longer exists"},
            )
        return removed

    # ── Helpers ───────────────────────────────────────────────────────────

    def _copy(self, record: ModelType) -> ModelType:
        return self.model(
            **{attr.key: copy.deepcopy(getattr(record, attr.key)) for attr in self._attrs}
        )

    def _apply_defaults(self, record: ModelType) -> None:
        # Column defaults normally fire on INSERT; a transient instance never sees one
        for attr in self._attrs:
            if getattr(record, attr.key) is not None:
                continue
            default = attr.columns[0].default
            if default is None:
                continue
            value = default.arg(None) if default.is_callable else default.arg
            setattr(record, attr.key, value)

    def _check_unique(self, record: ModelType) -> None:
        for field in self.unique_fields:
            value = getattr(record, field)
            for existing in self._records.values():
                if existing.id != record.id and getattr(existing, field) == value:
                    raise ConflictError(message=self.conflict_message, field=field)
