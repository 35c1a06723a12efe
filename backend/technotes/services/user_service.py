"""
TechNotes Backend — User Service (Business Logic)
===================================================

What:  List, create, update and delete users.
How:   Talks to a users Repository and a notes Repository (for the delete guard).
Who:   Called by the /users route handlers.

Password handling:
    Plaintext arrives in the request body, is hashed with bcrypt in a worker
    thread (technotes.security.hash_password), and only the digest is stored.
    Responses are built from UserResponse, which has no password field.

Delete guard:
    A user with at least one assigned note cannot be deleted. The guard runs
    before the existence check, so an id that owns notes always reports
    "User has assigned notes".
"""

import logging
from typing import List

from technotes.exceptions import ConflictError, DependencyError, NotFoundError
from technotes.models.note import Note
from technotes.models.user import User
from technotes.repositories.base import Repository
from technotes.schemas.common import MessageResponse
from technotes.schemas.user import UserCreate, UserDelete, UserResponse, UserUpdate
from technotes.security import hash_password

logger = logging.getLogger(__name__)

DUPLICATE_USERNAME = "Duplicate username"


class UserService:
    """Business logic layer for user operations."""

    def __init__(self, users: Repository[User], notes: Repository[Note]):
        self.users = users
        self.notes = notes

    async def list_users(self) -> List[UserResponse]:
        users = await self.users.find_all()
        if not users:
            raise NotFoundError(resource="User", message="No users found")
        return [UserResponse.model_validate(user) for user in users]

    async def create_user(self, payload: UserCreate) -> MessageResponse:
        """
        Create a user with a hashed password.

        Raises:
            ConflictError: Username already taken (→ 409)
            StorePersistenceError: The store rejected the insert (→ 400,
                "Invalid user data received")
        """
        duplicate = await self.users.find_one(username=payload.username)
        if duplicate is not None:
            raise ConflictError(message=DUPLICATE_USERNAME, field="username")

        hashed = await hash_password(payload.password)
        user = await self.users.create(
            {
                "username": payload.username,
                "password": hashed,
                "roles": list(payload.roles),
                "active": True,
            }
        )
        logger.info("User created: %s (%s) roles=%s", user.id, user.username, user.roles)
        return MessageResponse(message=f"New user {user.username} created")

    async def update_user(self, payload: UserUpdate) -> MessageResponse:
        """
        Update username, roles and active; re-hash the password only when one is given.

        Keeping the current username is not a conflict; only a *different*
        user holding it is.
        """
        user = await self.users.find_by_id(payload.id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=str(payload.id))

        duplicate = await self.users.find_one(username=payload.username)
        if duplicate is not None and duplicate.id != user.id:
            raise ConflictError(message=DUPLICATE_USERNAME, field="username")

        user.username = payload.username
        user.roles = list(payload.roles)
        user.active = payload.active
        if payload.password:
            user.password = await hash_password(payload.password)

        updated = await self.users.save(user)
        logger.info(
            "User updated: %s (active=%s, password_changed=%s)",
            updated.id, updated.active, bool(payload.password),
        )
        return MessageResponse(message=f"{updated.username} updated")

    async def delete_user(self, payload: UserDelete) -> MessageResponse:
        """
        Delete a user that has no assigned notes.

        Raises:
            DependencyError: At least one note is assigned to the user (→ 400)
            NotFoundError: No user with that id (→ 400)
        """
        assigned = await self.notes.find_one(user=payload.id)
        if assigned is not None:
            raise DependencyError(
                message="User has assigned notes",
                context={"user_id": str(payload.id), "note_id": str(assigned.id)},
            )

        user = await self.users.find_by_id(payload.id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=str(payload.id))

        deleted = await self.users.delete_one(user)
        logger.info("User deleted: %s (%s)", deleted.id, deleted.username)
        return MessageResponse(
            message=f"Username {deleted.username} with ID {deleted.id} deleted"
        )
