"""
TechNotes Backend — Note Service (Business Logic)
===================================================

What:  List, create, update and delete notes.
Why:   Keeps the duplicate-title rule, the assigned-user check and the
       username join out of the HTTP layer.
How:   Talks to a notes Repository and a users Repository; never to a session.
Who:   Called by the /notes route handlers.

Duplicate titles:
    Checked with a read before the write. Two concurrent requests can both pass
    that read; the SQL store's unique index on notes.title then rejects the
    second insert, which the repository reports as the same ConflictError.
"""

import asyncio
import logging
from typing import List, Optional
from uuid import UUID

from technotes.exceptions import ConflictError, NotFoundError
from technotes.models.note import Note
from technotes.models.user import User
from technotes.repositories.base import Repository
from technotes.schemas.common import MessageResponse
from technotes.schemas.note import NoteCreate, NoteDelete, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)

DUPLICATE_TITLE = "Duplicate note title"


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes(): every note, joined with its assigned user's username
        - create_note(): duplicate-title check, then insert (completed=False)
        - update_note(): existence + duplicate-title check, then overwrite
        - delete_note(): existence check, then unconditional delete
    """

    def __init__(self, notes: Repository[Note], users: Repository[User]):
        self.notes = notes
        self.users = users

    async def list_notes(self) -> List[NoteResponse]:
        """
        Return all notes with a denormalized `username`.

        Each user lookup is independent, so they run concurrently. A note whose
        user has been deleted keeps username=None instead of failing the list.

        Raises:
            NotFoundError: There are no notes at all (→ 400)
        """
        notes = await self.notes.find_all()
        if not notes:
            raise NotFoundError(resource="Note", message="No notes found")

        usernames = await asyncio.gather(
            *(self._username_for(note.user) for note in notes)
        )
        return [
            NoteResponse.model_validate(note).model_copy(update={"username": username})
            for note, username in zip(notes, usernames)
        ]

    async def create_note(self, payload: NoteCreate) -> MessageResponse:
        """
        Create a note assigned to an existing user.

        Raises:
            ConflictError: A note with this exact title exists (→ 409)
            NotFoundError: `user` does not resolve to a user (→ 400)
            StorePersistenceError: The store rejected the insert (→ 400)
        """
        duplicate = await self.notes.find_one(title=payload.title)
        if duplicate is not None:
            raise ConflictError(message=DUPLICATE_TITLE, field="title")

        await self._require_user(payload.user)

        note = await self.notes.create(
            {
                "user": payload.user,
                "title": payload.title,
                "text": payload.text,
                "completed": False,
            }
        )
        logger.info("Note created: %s (%s)", note.id, note.title)
        return MessageResponse(message=f"New note {note.title} created")

    async def update_note(self, payload: NoteUpdate) -> MessageResponse:
        """
        Overwrite user, title, text and completed on an existing note.

        Renaming a note to its own current title is not a conflict; only a
        *different* note holding the title is.
        """
        note = await self.notes.find_by_id(payload.id)
        if note is None:
            raise NotFoundError(resource="Note", resource_id=str(payload.id))

        duplicate = await self.notes.find_one(title=payload.title)
        if duplicate is not None and duplicate.id != note.id:
            raise ConflictError(message=DUPLICATE_TITLE, field="title")

        await self._require_user(payload.user)

        note.user = payload.user
        note.title = payload.title
        note.text = payload.text
        note.completed = payload.completed
        updated = await self.notes.save(note)

        logger.info("Note updated: %s (completed=%s)", updated.id, updated.completed)
        return MessageResponse(message=f"'{updated.title}' updated")

    async def delete_note(self, payload: NoteDelete) -> MessageResponse:
        note = await self.notes.find_by_id(payload.id)
        if note is None:
            raise NotFoundError(resource="Note", resource_id=str(payload.id))

        deleted = await self.notes.delete_one(note)
        logger.info("Note deleted: %s (%s)", deleted.id, deleted.title)
        return MessageResponse(message=f"Note '{deleted.title}' with ID {deleted.id} deleted")

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _username_for(self, user_id: UUID) -> Optional[str]:
        user = await self.users.find_by_id(user_id)
        return user.username if user is not None else None

    async def _require_user(self, user_id: UUID) -> None:
        if await self.users.find_by_id(user_id) is None:
            raise NotFoundError(resource="User", resource_id=str(user_id))
