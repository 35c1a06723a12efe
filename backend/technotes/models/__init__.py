# Models package init
"""
TechNotes Backend — ORM Models
================================

Importing this package registers every model with `Base.metadata`,
which Alembic and the test suite rely on.
"""

from technotes.models.note import Note
from technotes.models.user import User

__all__ = ["Note", "User"]
