"""
United Pets Backend — Adoption Request Routes
==============================================

Endpoints:
    POST   /adoptionRequest               auth                  submit a request
    GET    /adoptionRequest/owner         auth                  requests for my pets
    GET    /adoptionRequest/mine          auth                  requests I submitted
    PATCH  /adoptionRequest/{requestId}   pet owner / admin     decide (also marks pet adopted)
    DELETE /adoptionRequest/{requestId}   requester / owner / admin
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.database import get_db_session
from united_pets.routes.dependencies import get_current_identity
from united_pets.schemas.adoption import (
    AdoptionRequestCreate,
    AdoptionRequestList,
    AdoptionRequestResponse,
    AdoptionStatusUpdate,
)
from united_pets.schemas.common import DeleteResponse, ErrorResponse
from united_pets.services.adapter_base import Identity
from united_pets.services.adoption_service import adoption_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/adoptionRequest", tags=["Adoption Requests"])


@router.post(
    "",
    response_model=AdoptionRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Pet not found", "model": ErrorResponse}},
    summary="Request to adopt a pet",
)
async def create_request(
    payload: AdoptionRequestCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> AdoptionRequestResponse:
    request = await adoption_service.create_request(db, payload, requester=identity)
    return AdoptionRequestResponse.from_model(request)


@router.get("/owner", response_model=AdoptionRequestList, summary="Requests for my pets")
async def list_for_owner(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> AdoptionRequestList:
    requests = await adoption_service.list_for_owner(db, owner=identity)
    return AdoptionRequestList(
        items=[AdoptionRequestResponse.from_model(r) for r in requests],
        total=len(requests),
    )


@router.get("/mine", response_model=AdoptionRequestList, summary="Requests I submitted")
async def list_mine(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> AdoptionRequestList:
    requests = await adoption_service.list_for_requester(db, requester=identity)
    return AdoptionRequestList(
        items=[AdoptionRequestResponse.from_model(r) for r in requests],
        total=len(requests),
    )


@router.patch(
    "/{request_id}",
    response_model=AdoptionRequestResponse,
    responses={
        400: {"description": "petId mismatch", "model": ErrorResponse},
        403: {"description": "Not the pet's owner or an admin", "model": ErrorResponse},
        404: {"description": "Request or pet not found", "model": ErrorResponse},
    },
    summary="Accept or reject an adoption request",
)
async def update_status(
    request_id: UUID,
    payload: AdoptionStatusUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> AdoptionRequestResponse:
    request = await adoption_service.update_status(db, request_id, payload, actor=identity)
    return AdoptionRequestResponse.from_model(request)


@router.delete(
    "/{request_id}",
    response_model=DeleteResponse,
    responses={
        403: {"description": "Not the requester, the pet's owner or an admin", "model": ErrorResponse},
        404: {"description": "Request not found", "model": ErrorResponse},
    },
    summary="Withdraw or dismiss an adoption request",
)
async def delete_request(
    request_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await adoption_service.delete_request(db, request_id, actor=identity)
    return DeleteResponse(id=str(request_id))
