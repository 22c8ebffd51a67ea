"""User request/response schemas."""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from united_pets.models.user import User
from united_pets.schemas.common import CamelModel, OpenDocument


class UserRegister(OpenDocument):
    """
    Registration payload.

    Anything besides `email` and `name` (photo URL, phone, ...) is stored as
    opaque profile data. A `role` key is accepted on the wire but discarded by
    UserService.
    """
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=200)


class UserResponse(OpenDocument):
    id: uuid.UUID
    email: str
    role: str
    name: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls.model_validate(
            {
                **(user.profile or {}),
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "name": user.name,
                "createdAt": user.created_at,
            }
        )


class UserList(CamelModel):
    items: List[UserResponse]
    total: int


class RoleResponse(CamelModel):
    email: str
    role: str


class RoleUpdate(CamelModel):
    role: Literal["user", "admin"]
