"""
TechNotes Backend — User Request/Response Schemas
===================================================

Security:
    UserResponse has no password field, so the hash can never be serialized,
    whatever the service hands to the route.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StrictBool, StringConstraints, field_validator

# Role tags are trimmed; a blank tag is rejected like a missing field
RoleTag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# bcrypt only accepts up to 72 bytes of input; "é" alone is two
MAX_PASSWORD_BYTES = 72


def password_within_bcrypt_limit(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes as UTF-8")
    return value


class UserCreate(BaseModel):
    """Body of POST /users. All three fields are mandatory."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    roles: List[RoleTag] = Field(min_length=1, description="Ordered role tags, e.g. ['Employee']")

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        return password_within_bcrypt_limit(value)


class UserUpdate(BaseModel):
    """
    Body of PATCH /users.

    password is optional here: omitted, null, or "" all leave the stored hash untouched.
    """
    id: uuid.UUID
    username: str = Field(min_length=1)
    roles: List[RoleTag] = Field(min_length=1)
    active: StrictBool
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: Optional[str]) -> Optional[str]:
        return password_within_bcrypt_limit(value)


class UserDelete(BaseModel):
    """Body of DELETE /users."""
    id: uuid.UUID


class UserResponse(BaseModel):
    """One entry of GET /users."""
    id: uuid.UUID
    username: str
    roles: List[str]
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
