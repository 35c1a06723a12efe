"""
TechNotes Backend — Notes Route Handlers
==========================================

What:  GET/POST/PATCH/DELETE /notes.
How:   Bodies are validated by the schemas in technotes.schemas.note; the
       handler delegates to NoteService and returns its result as JSON.
       Records are addressed by `id` in the request body, not in the path.

Status codes:
    200  success (all four methods)
    400  missing/invalid field, unknown note or user, no notes to list
    409  duplicate title
"""

from typing import List

from fastapi import APIRouter, Depends

from technotes.dependencies import get_note_service
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.note import NoteCreate, NoteDelete, NoteResponse, NoteUpdate
from technotes.services.note_service import NoteService

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteResponse],
    # username is left out entirely when the assigned user no longer exists
    response_model_exclude_none=True,
    responses={400: {"description": "No notes found", "model": ErrorResponse}},
    summary="List all notes with the assigned user's username",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return await service.list_notes()


@router.post(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or unknown user", "model": ErrorResponse},
        409: {"description": "Duplicate note title", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    return await service.create_note(payload)


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields, note or user not found", "model": ErrorResponse},
        409: {"description": "Another note already has this title", "model": ErrorResponse},
    },
    summary="Update a note",
)
async def update_note(
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    return await service.update_note(payload)


@router.delete(
    "",
    response_model=MessageResponse,
    responses={400: {"description": "Note ID missing or note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    payload: NoteDelete,
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    return await service.delete_note(payload)
