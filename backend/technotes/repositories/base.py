"""
TechNotes Backend — Persistence Port
======================================

What:  The abstract interface every store implementation provides.
Why:   Services depend on this port only, so the SQL store and the in-memory
       store are interchangeable (production vs. tests / local development).

Operations:
    find_all()            → every record of the model
    find_by_id(id)        → one record or None
    find_one(**criteria)  → first record whose attributes equal the criteria, or None
    create(values)        → insert a new record, return it with its generated id
    save(record)          → persist changes made to a record returned by a find
    delete_one(record)    → remove a record, return it

Write failures surface as ConflictError (unique field taken) or
StorePersistenceError (anything else); reads let driver errors propagate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from technotes.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class Repository(ABC, Generic[ModelType]):
    """Store-agnostic CRUD primitives over a single model type."""

    model: Type[ModelType]

    @abstractmethod
    async def find_all(self) -> List[ModelType]:
        ...

    @abstractmethod
    async def find_by_id(self, record_id: UUID) -> Optional[ModelType]:
        ...

    @abstractmethod
    async def find_one(self, **criteria: Any) -> Optional[ModelType]:
        ...

    @abstractmethod
    async def create(self, values: Dict[str, Any]) -> ModelType:
        ...

    @abstractmethod
    async def save(self, record: ModelType) -> ModelType:
        ...

    @abstractmethod
    async def delete_one(self, record: ModelType) -> ModelType:
        ...

    @property
    def resource_name(self) -> str:
        return self.model.__name__
