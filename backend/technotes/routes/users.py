"""
TechNotes Backend — Users Route Handlers
==========================================

What:  GET/POST/PATCH/DELETE /users.
Security:
    The password is accepted on POST (required) and PATCH (optional) but is
    never echoed: list responses use UserResponse, which has no password field.
"""

from typing import List

from fastapi import APIRouter, Depends

from technotes.dependencies import get_user_service
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.user import UserCreate, UserDelete, UserResponse, UserUpdate
from technotes.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    responses={400: {"description": "No users found", "model": ErrorResponse}},
    summary="List all users (without passwords)",
)
async def list_users(
    service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    return await service.list_users()


@router.post(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or invalid user data", "model": ErrorResponse},
        409: {"description": "Duplicate username", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return await service.create_user(payload)


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or user not found", "model": ErrorResponse},
        409: {"description": "Another user already has this username", "model": ErrorResponse},
    },
    summary="Update a user",
)
async def update_user(
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return await service.update_user(payload)


@router.delete(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "User ID missing, user has notes, or user not found",
              "model": ErrorResponse},
    },
    summary="Delete a user without assigned notes",
)
async def delete_user(
    payload: UserDelete,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return await service.delete_user(payload)
