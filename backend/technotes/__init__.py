"""
TechNotes Backend — Application Package Initializer
=====================================================

What: Marks the `technotes` directory as a Python package.
Why:  Enables module imports like `from technotes.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend keeps the same layered shape for both resources (notes, users):

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Duplicate checks, guards, hashing
    ├─────────────────────────────────────┤
    │     Repositories (Persistence Port) │  ← find_all / find_one / create / save / delete_one
    ├─────────────────────────────────────┤
    │  Models & Schemas / Database        │  ← SQLAlchemy ORM + Pydantic, async sessions
    └─────────────────────────────────────┘

    Services never touch a session directly; they talk to a Repository.
    Production wires SQLAlchemy repositories, tests wire in-memory ones.
"""

__version__ = "1.0.0"
