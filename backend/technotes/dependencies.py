"""
TechNotes Backend — FastAPI Dependencies
==========================================

What:  Builds the repositories and services each request works with.
How:   `get_repositories` picks the store from settings.store_backend:
         - "sql":    one AsyncSession per request (committed on success,
                     rolled back on error), with a repository per model on it
         - "memory": process-wide in-memory repositories
       Services are then constructed per request from those repositories.
Who:   Injected into route handlers via Depends(); tests override
       `get_repositories` through app.dependency_overrides.
"""

from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Depends

from technotes.config import settings
from technotes.database import session_scope
from technotes.models.note import Note
from technotes.models.user import User
from technotes.repositories.base import Repository
from technotes.repositories.memory import InMemoryRepository
from technotes.repositories.sql import SQLAlchemyRepository
from technotes.services.note_service import DUPLICATE_TITLE, NoteService
from technotes.services.user_service import DUPLICATE_USERNAME, UserService


@dataclass
class Repositories:
    users: Repository[User]
    notes: Repository[Note]


def build_memory_repositories() -> Repositories:
    return Repositories(
        users=InMemoryRepository(
            User, unique_fields=("username",), conflict_message=DUPLICATE_USERNAME
        ),
        notes=InMemoryRepository(
            Note, unique_fields=("title",), conflict_message=DUPLICATE_TITLE
        ),
    )


# Shared across requests when STORE_BACKEND=memory; lost on restart
memory_repositories = build_memory_repositories()


async def get_repositories() -> AsyncGenerator[Repositories, None]:
    if settings.store_backend == "memory":
        yield memory_repositories
        return

    async with session_scope() as session:
        yield Repositories(
            users=SQLAlchemyRepository(session, User, conflict_message=DUPLICATE_USERNAME),
            notes=SQLAlchemyRepository(session, Note, conflict_message=DUPLICATE_TITLE),
        )


def get_note_service(repos: Repositories = Depends(get_repositories)) -> NoteService:
    return NoteService(notes=repos.notes, users=repos.users)


def get_user_service(repos: Repositories = Depends(get_repositories)) -> UserService:
    return UserService(users=repos.users, notes=repos.notes)
