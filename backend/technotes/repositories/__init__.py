# Repositories package init
"""
TechNotes Backend — Persistence Layer
=======================================

Repository Inventory:
    - Repository (abstract): find_all / find_by_id / find_one / create / save / delete_one
    - SQLAlchemyRepository: async SQLAlchemy implementation (production)
    - InMemoryRepository: dict-backed implementation (tests, local development)
"""

from technotes.repositories.base import Repository
from technotes.repositories.memory import InMemoryRepository
from technotes.repositories.sql import SQLAlchemyRepository

__all__ = ["Repository", "InMemoryRepository", "SQLAlchemyRepository"]
