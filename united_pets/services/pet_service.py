"""
United Pets Backend — Pet Service
==================================

What:  Pet listing, browsing and owner-gated mutations.
Who:   routes/pets.py; AdoptionService reuses `get_pet`.

Rules:
    - addedBy comes from the verified identity, never from the payload.
    - adoptionStatus starts at 'Not Adopted' and only the adopt operation (or
      an adoption request decision) changes it.
    - Update, adopt and delete go through AuthorizationService.require_owner_or_admin.

Listing:
    skip = (page - 1) * limit; hasMore = skip + len(items) < total
    Default order is addedTime DESC (newest first); sort='oldest' flips it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import NotFoundError, ValidationError
from united_pets.models.adoption_request import AdoptionRequest
from united_pets.models.pet import ADOPTED, NOT_ADOPTED, Pet
from united_pets.schemas.common import strip_keys
from united_pets.schemas.pet import PetCreate, PetUpdate
from united_pets.services.adapter_base import Identity
from united_pets.services.authorization_service import authorization_service
from united_pets.services.query import (
    PageRequest,
    PageResult,
    contains_ci,
    document_field_equals,
    paginate,
)

logger = logging.getLogger(__name__)

PROTECTED_PET_FIELDS = {"id", "name", "category", "added_by", "adoption_status", "added_time"}

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"


@dataclass
class PetFilter:
    """Browse filters; `fields` holds equality filters on the opaque details."""
    category: Optional[str] = None
    added_by: Optional[str] = None
    adoption_status: Optional[str] = None
    search: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)


class PetService:

    async def create_pet(self, db: AsyncSession, payload: PetCreate, owner: Identity) -> Pet:
        pet = Pet(
            name=payload.name,
            category=payload.category,
            added_by=owner.email,
            adoption_status=NOT_ADOPTED,
            details=strip_keys(payload.extra_fields(), PROTECTED_PET_FIELDS),
        )
        if payload.added_time is not None:
            pet.added_time = payload.added_time
        db.add(pet)
        await db.flush()
        logger.info("Pet %s (%s) listed by %s", pet.id, pet.name, owner.email)
        return pet

    async def get_pet(self, db: AsyncSession, pet_id: uuid.UUID) -> Pet:
        pet = await db.get(Pet, pet_id)
        if pet is None:
            raise NotFoundError(resource="pet", resource_id=str(pet_id))
        return pet

    async def update_pet(
        self, db: AsyncSession, pet_id: uuid.UUID, payload: PetUpdate, actor: Identity
    ) -> Pet:
        """Replace the named fields; id, owner and adoption status are not patchable here."""
        pet = await self.get_pet(db, pet_id)
        await authorization_service.require_owner_or_admin(
            db, actor, pet.added_by, action="update this pet"
        )

        if payload.name is not None:
            pet.name = payload.name
        if payload.category is not None:
            pet.category = payload.category

        extra = strip_keys(payload.extra_fields(), PROTECTED_PET_FIELDS)
        if extra:
            # New dict so the JSON column registers the change
            pet.details = {**(pet.details or {}), **extra}

        await db.flush()
        return pet

    async def mark_adopted(self, db: AsyncSession, pet_id: uuid.UUID, actor: Identity) -> Pet:
        """Set status to 'Adopted'. Already adopted pets are left as they are."""
        pet = await self.get_pet(db, pet_id)
        await authorization_service.require_owner_or_admin(
            db, actor, pet.added_by, action="change this pet's adoption status"
        )
        pet.adoption_status = ADOPTED
        await db.flush()
        logger.info("Pet %s marked adopted by %s", pet.id, actor.email)
        return pet

    async def delete_pet(self, db: AsyncSession, pet_id: uuid.UUID, actor: Identity) -> None:
        pet = await self.get_pet(db, pet_id)
        await authorization_service.require_owner_or_admin(
            db, actor, pet.added_by, action="delete this pet"
        )
        # Requests for the pet go with it; SQLite does not enforce the FK cascade
        await db.execute(delete(AdoptionRequest).where(AdoptionRequest.pet_id == pet.id))
        await db.delete(pet)
        await db.flush()
        logger.info("Pet %s deleted by %s", pet_id, actor.email)

    async def list_pets(
        self,
        db: AsyncSession,
        filters: PetFilter,
        page: PageRequest,
        sort: str = SORT_NEWEST,
    ) -> PageResult[Pet]:
        """
        Filtered page of pets ordered by addedTime, newest first by default.

        addedTime defaults to the insert time, so this is insertion order.
        Pets sharing an addedTime are ordered by id, which keeps pages stable
        (no repeats or gaps) but is not their insertion order.
        """
        if sort not in (SORT_NEWEST, SORT_OLDEST):
            raise ValidationError(
                message=f"Invalid sort '{sort}'. Use '{SORT_NEWEST}' or '{SORT_OLDEST}'",
                field="sort",
            )

        query = select(Pet)
        if filters.category:
            query = query.where(contains_ci(Pet.category, filters.category))
        if filters.added_by:
            query = query.where(Pet.added_by == filters.added_by.strip().lower())
        if filters.adoption_status:
            query = query.where(Pet.adoption_status == filters.adoption_status)
        if filters.search:
            query = query.where(contains_ci(Pet.name, filters.search))
        for name, value in filters.fields.items():
            query = query.where(document_field_equals(Pet.details, name, value))

        # id breaks addedTime ties so pages stay stable
        if sort == SORT_OLDEST:
            query = query.order_by(Pet.added_time.asc(), Pet.id.asc())
        else:
            query = query.order_by(Pet.added_time.desc(), Pet.id.asc())

        return await paginate(db, query, page)

    async def latest_pets(self, db: AsyncSession, count: int = 6) -> List[Pet]:
        result = await db.execute(select(Pet).order_by(Pet.added_time.desc()).limit(count))
        return list(result.scalars().all())

    async def similar_pets(
        self,
        db: AsyncSession,
        category: str,
        exclude_id: Optional[uuid.UUID] = None,
        limit: int = 4,
    ) -> List[Pet]:
        """Pets whose category contains `category` (case-insensitive), minus one id."""
        query = select(Pet).where(contains_ci(Pet.category, category))
        if exclude_id is not None:
            query = query.where(Pet.id != exclude_id)
        query = query.order_by(Pet.added_time.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())


pet_service = PetService()
