"""
United Pets Backend — User Routes
==================================

What:  Registration, profile/role lookups and admin role management.

Endpoints:
    POST  /users                public   register (role always 'user')
    GET   /users                admin    list users, optional ?search=
    GET   /users/me             auth     the caller's own user record
    GET   /users/role/{email}   auth     role lookup used by the web client
    PATCH /users/{userId}/role  admin    promote / demote
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.database import get_db_session
from united_pets.routes.dependencies import get_current_identity, require_admin
from united_pets.schemas.common import ErrorResponse
from united_pets.schemas.user import RoleResponse, RoleUpdate, UserList, UserRegister, UserResponse
from united_pets.services.adapter_base import Identity
from united_pets.services.user_service import normalize_email, user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register a user",
)
async def register_user(
    payload: UserRegister,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.register(db, payload)
    return UserResponse.from_model(user)


@router.get(
    "",
    response_model=UserList,
    responses={403: {"description": "Admin access required", "model": ErrorResponse}},
    summary="List all users (admin)",
)
async def list_users(
    search: Optional[str] = Query(default=None, max_length=200),
    _admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserList:
    users = await user_service.list_users(db, search=search)
    return UserList(items=[UserResponse.from_model(u) for u in users], total=len(users))


@router.get("/me", response_model=UserResponse, summary="The caller's user record")
async def get_me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.get_by_email(db, identity.email)
    return UserResponse.from_model(user)


@router.get(
    "/role/{email}",
    response_model=RoleResponse,
    responses={404: {"description": "No such user", "model": ErrorResponse}},
    summary="Look up a user's role",
)
async def get_role(
    email: str,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> RoleResponse:
    role = await user_service.get_role(db, email)
    return RoleResponse(email=normalize_email(email), role=role)


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    responses={
        403: {"description": "Admin access required", "model": ErrorResponse},
        404: {"description": "No such user", "model": ErrorResponse},
    },
    summary="Change a user's role (admin)",
)
async def set_role(
    user_id: UUID,
    payload: RoleUpdate,
    _admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.set_role(db, user_id, payload.role)
    return UserResponse.from_model(user)
