"""
TechNotes Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.

Column notes:
    - password: bcrypt digest only; the plaintext never reaches this model
    - roles: ordered JSON array of role tags ("Employee", "Manager", "Admin")
    - active: gates sign-in for the (external) auth layer; defaults to True
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base
from technotes.models.note import _utcnow


class User(Base):
    """An employee account that notes can be assigned to."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    username: Mapped[str] = mapped_column(String(150), nullable=False)

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash (salt embedded)",
    )

    roles: Mapped[List[str]] = mapped_column(JSON, nullable=False)

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("uq_users_username", "username", unique=True),
    )

    def __repr__(self) -> str:
        # password deliberately left out
        return f"<User(id={self.id}, username='{self.username}', active={self.active})>"
