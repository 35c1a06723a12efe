"""
TechNotes Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the notes API contract.
Why:   Every required field is declared here, so a request with a missing,
       empty, or wrongly typed field is rejected before any service code runs.
How:   FastAPI validates bodies against the request models; the global
       RequestValidationError handler turns failures into 400 responses.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictBool


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /notes. `completed` is not accepted; new notes start open."""
    user: uuid.UUID = Field(description="Id of the user the note is assigned to")
    title: str = Field(min_length=1, description="Unique note title")
    text: str = Field(min_length=1, description="Note body")


class NoteUpdate(BaseModel):
    """
    Body of PATCH /notes.

    Why StrictBool for completed:
        "true", 1 and "yes" are rejected; only a JSON boolean is accepted.
    """
    id: uuid.UUID = Field(description="Id of the note to update")
    user: uuid.UUID = Field(description="Id of the user the note is assigned to")
    title: str = Field(min_length=1)
    text: str = Field(min_length=1)
    completed: StrictBool


class NoteDelete(BaseModel):
    """Body of DELETE /notes."""
    id: uuid.UUID = Field(description="Id of the note to delete")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  One entry of GET /notes.
    Why username: Denormalized from the assigned user so the client can render
           the list without a second request. Omitted from the JSON when the
           user no longer exists.
    """
    id: uuid.UUID
    user: uuid.UUID
    title: str
    text: str
    completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    username: Optional[str] = Field(
        default=None,
        description="Username of the assigned user (absent if that user was deleted)",
    )

    model_config = {"from_attributes": True}
