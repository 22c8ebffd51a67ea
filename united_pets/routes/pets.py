"""
United Pets Backend — Pet Routes
=================================

What:  Listing, browsing and owner-gated changes to pets.

Endpoints:
    POST   /pets                auth         list a pet (addedBy = caller)
    GET    /pets                public       paginated browse with filters
    GET    /pets/latest         public       newest 6
    GET    /pets/similar        public       same category, minus one id
    GET    /pets/{petId}        public
    PUT    /pets/{petId}        owner/admin
    PATCH  /pets/{petId}/adopt  owner/admin  set 'Adopted'
    DELETE /pets/{petId}        owner/admin

Filtering (GET /pets):
    ?category=dog          case-insensitive substring
    ?addedBy=a@b.c         exact owner email
    ?adoptionStatus=...    exact
    ?search=rex            case-insensitive substring of the name
    ?<field>=<value>       any other query parameter is an equality filter
                           on the pet's descriptive fields (e.g. ?gender=male)

Route order matters: /latest and /similar are declared before /{petId}.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.config import settings
from united_pets.database import get_db_session
from united_pets.routes.dependencies import get_current_identity
from united_pets.schemas.common import DeleteResponse, ErrorResponse
from united_pets.schemas.pet import PetCreate, PetPage, PetResponse, PetUpdate
from united_pets.services.adapter_base import Identity
from united_pets.services.pet_service import SORT_NEWEST, PetFilter, pet_service
from united_pets.services.query import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pets", tags=["Pets"])

# Query parameters with a dedicated meaning; everything else filters `details`
RESERVED_QUERY_PARAMS = {"page", "limit", "sort", "category", "addedBy", "adoptionStatus", "search"}

_OWNER_ONLY = {
    403: {"description": "Not the owner or an admin", "model": ErrorResponse},
    404: {"description": "Pet not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=PetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="List a pet for adoption",
)
async def create_pet(
    payload: PetCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> PetResponse:
    pet = await pet_service.create_pet(db, payload, owner=identity)
    return PetResponse.from_model(pet)


@router.get("", response_model=PetPage, summary="Browse pets")
async def list_pets(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    sort: str = Query(default=SORT_NEWEST, description="'newest' or 'oldest' by addedTime"),
    category: Optional[str] = Query(default=None, max_length=100),
    added_by: Optional[str] = Query(default=None, alias="addedBy"),
    adoption_status: Optional[str] = Query(default=None, alias="adoptionStatus"),
    search: Optional[str] = Query(default=None, max_length=200),
    db: AsyncSession = Depends(get_db_session),
) -> PetPage:
    field_filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in RESERVED_QUERY_PARAMS and value != ""
    }
    filters = PetFilter(
        category=category,
        added_by=added_by,
        adoption_status=adoption_status,
        search=search,
        fields=field_filters,
    )
    result = await pet_service.list_pets(db, filters, PageRequest(page=page, limit=limit), sort=sort)
    return PetPage(
        items=[PetResponse.from_model(p) for p in result.items],
        total=result.total,
        has_more=result.has_more,
    )


@router.get("/latest", response_model=list[PetResponse], summary="Newest pets")
async def latest_pets(
    count: int = Query(default=6, ge=1, le=50),
    db: AsyncSession = Depends(get_db_session),
) -> list[PetResponse]:
    pets = await pet_service.latest_pets(db, count=count)
    return [PetResponse.from_model(p) for p in pets]


@router.get("/similar", response_model=list[PetResponse], summary="Pets in the same category")
async def similar_pets(
    category: str = Query(min_length=1, max_length=100),
    exclude_id: Optional[UUID] = Query(default=None, alias="excludeId"),
    limit: int = Query(default=4, ge=1, le=20),
    db: AsyncSession = Depends(get_db_session),
) -> list[PetResponse]:
    pets = await pet_service.similar_pets(db, category, exclude_id=exclude_id, limit=limit)
    return [PetResponse.from_model(p) for p in pets]


@router.get(
    "/{pet_id}",
    response_model=PetResponse,
    responses={404: {"description": "Pet not found", "model": ErrorResponse}},
    summary="Get one pet",
)
async def get_pet(pet_id: UUID, db: AsyncSession = Depends(get_db_session)) -> PetResponse:
    pet = await pet_service.get_pet(db, pet_id)
    return PetResponse.from_model(pet)


@router.put("/{pet_id}", response_model=PetResponse, responses=_OWNER_ONLY, summary="Update a pet")
async def update_pet(
    pet_id: UUID,
    payload: PetUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> PetResponse:
    pet = await pet_service.update_pet(db, pet_id, payload, actor=identity)
    return PetResponse.from_model(pet)


@router.patch(
    "/{pet_id}/adopt",
    response_model=PetResponse,
    responses=_OWNER_ONLY,
    summary="Mark a pet as adopted",
)
async def adopt_pet(
    pet_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> PetResponse:
    pet = await pet_service.mark_adopted(db, pet_id, actor=identity)
    return PetResponse.from_model(pet)


@router.delete("/{pet_id}", response_model=DeleteResponse, responses=_OWNER_ONLY, summary="Delete a pet")
async def delete_pet(
    pet_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await pet_service.delete_pet(db, pet_id, actor=identity)
    return DeleteResponse(id=str(pet_id))
