"""
United Pets Backend — User Service
===================================

What:  Registration, role lookup, admin listing and role changes.

Privilege rule:
    Registration always stores role='user'. A `role` sent by the client is
    dropped (and logged); the only way to become admin is SetRole, which the
    admin tier guards.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import ConflictError, NotFoundError
from united_pets.models.user import ROLE_USER, User
from united_pets.schemas.common import strip_keys
from united_pets.schemas.user import UserRegister
from united_pets.services.query import contains_ci

logger = logging.getLogger(__name__)

# Server-controlled keys that never land in the opaque profile
PROTECTED_PROFILE_FIELDS = {"id", "email", "role", "name", "created_at"}


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:

    async def register(self, db: AsyncSession, payload: UserRegister) -> User:
        """
        Create a user with the default role.

        Raises:
            ConflictError: the email is already registered; the stored user
                is left untouched.
        """
        email = normalize_email(str(payload.email))

        existing = await db.scalar(select(User.id).where(User.email == email))
        if existing is not None:
            raise ConflictError(message="user already exist", context={"email": email})

        extra = payload.extra_fields()
        if "role" in extra:
            logger.warning("Ignoring client-supplied role %r for %s", extra["role"], email)

        user = User(
            email=email,
            name=payload.name,
            role=ROLE_USER,
            profile=strip_keys(extra, PROTECTED_PROFILE_FIELDS),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            raise ConflictError(message="user already exist", context={"email": email})

        logger.info("Registered user %s", email)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> User:
        email = normalize_email(email)
        user = await db.scalar(select(User).where(User.email == email))
        if user is None:
            raise NotFoundError(resource="user", resource_id=email)
        return user

    async def get_role(self, db: AsyncSession, email: str) -> str:
        user = await self.get_by_email(db, email)
        return user.role or ROLE_USER

    async def list_users(self, db: AsyncSession, search: Optional[str] = None) -> List[User]:
        query = select(User).order_by(User.created_at.asc())
        if search:
            query = query.where(or_(contains_ci(User.email, search), contains_ci(User.name, search)))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def set_role(self, db: AsyncSession, user_id: uuid.UUID, role: str) -> User:
        """Overwrite the role (idempotent). The caller has already passed the admin tier."""
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        if user.role != role:
            logger.info("Changing role of %s from %s to %s", user.email, user.role, role)
            user.role = role
            await db.flush()
        return user


user_service = UserService()
