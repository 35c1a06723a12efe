"""
TechNotes Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Who:   Read and written through the repositories; Alembic mirrors it in migration 001.

Table Design Rationale:
    - UUID primary key generated in Python, so the in-memory store and the SQL
      store hand out the same kind of id
    - user_id: plain indexed column, no foreign key; a note keeps pointing at a
      user id even if that user row goes away, and the list endpoint simply
      omits the username for it
    - title: unique index, backing the duplicate-title check at write time
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A ticket-style note assigned to a user.

    Lifecycle:
        1. Created via POST /notes (completed = False)
        2. Overwritten via PATCH /notes (user, title, text, completed)
        3. Deleted via DELETE /notes, unconditionally
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Exposed as `user` in the API; stored as user_id ("user" is reserved in PostgreSQL)
    user: Mapped[uuid.UUID] = mapped_column(
        "user_id",
        Uuid,
        nullable=False,
        index=True,
        comment="Id of the user this note is assigned to",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=sql_text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("uq_notes_title", "title", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', completed={self.completed})>"
