"""
United Pets Backend — User Model
=================================

What:  ORM model for the `users` table (one row per registered email).
Why:   The role column is the input of the admin tier of the authorization gate.

Role model:
    - Every registration is stored with role='user'; the client never picks it.
    - Elevation to 'admin' happens only through the admin-only role change.
    - Users are never deleted.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from united_pets.database import Base
from united_pets.models.types import JSONDocument, utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Stored normalised (trimmed, lower-case); unique index backs the Conflict rule
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)

    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Opaque profile fields sent at registration (photo URL, phone, ...)
    profile: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}', role='{self.role}')>"
