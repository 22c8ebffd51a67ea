"""
United Pets Backend — Adoption Request Service
===============================================

What:  Submitting, listing, deciding on and withdrawing adoption requests.

Who may do what:
    create          any authenticated user, for an existing pet
    list (owner)    requests for pets the caller listed
    list (mine)     requests the caller submitted
    update status   the referenced pet's owner, or an admin
    delete          the requester, the pet's owner, or an admin

Decision side effect:
    Any status update also sets the referenced pet to 'Adopted', whatever the
    new request status is. Clients rely on this, so it is kept as is.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import NotFoundError, ValidationError
from united_pets.models.adoption_request import STATUS_PENDING, AdoptionRequest
from united_pets.models.pet import ADOPTED, Pet
from united_pets.schemas.adoption import AdoptionRequestCreate, AdoptionStatusUpdate
from united_pets.schemas.common import strip_keys
from united_pets.services.adapter_base import Identity
from united_pets.services.authorization_service import authorization_service
from united_pets.services.pet_service import pet_service

logger = logging.getLogger(__name__)

PROTECTED_REQUEST_FIELDS = {"id", "pet_id", "requester_email", "status", "created_at"}


class AdoptionService:

    async def create_request(
        self, db: AsyncSession, payload: AdoptionRequestCreate, requester: Identity
    ) -> AdoptionRequest:
        # Raises NotFoundError for a dangling petId
        pet = await pet_service.get_pet(db, payload.pet_id)

        request = AdoptionRequest(
            pet_id=pet.id,
            requester_email=requester.email,
            status=STATUS_PENDING,
            details=strip_keys(payload.extra_fields(), PROTECTED_REQUEST_FIELDS),
        )
        db.add(request)
        await db.flush()
        logger.info("Adoption request %s for pet %s by %s", request.id, pet.id, requester.email)
        return request

    async def get_request(self, db: AsyncSession, request_id: uuid.UUID) -> AdoptionRequest:
        request = await db.get(AdoptionRequest, request_id)
        if request is None:
            raise NotFoundError(resource="adoption request", resource_id=str(request_id))
        return request

    async def list_for_owner(self, db: AsyncSession, owner: Identity) -> List[AdoptionRequest]:
        """Requests whose referenced pet was listed by `owner`, newest first."""
        owned_pets = select(Pet.id).where(Pet.added_by == owner.email)
        query = (
            select(AdoptionRequest)
            .where(AdoptionRequest.pet_id.in_(owned_pets))
            .order_by(AdoptionRequest.created_at.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_for_requester(
        self, db: AsyncSession, requester: Identity
    ) -> List[AdoptionRequest]:
        query = (
            select(AdoptionRequest)
            .where(AdoptionRequest.requester_email == requester.email)
            .order_by(AdoptionRequest.created_at.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        request_id: uuid.UUID,
        payload: AdoptionStatusUpdate,
        actor: Identity,
    ) -> AdoptionRequest:
        """
        Record the owner's decision and mark the pet adopted.

        Raises:
            NotFoundError: unknown request, or its pet no longer exists.
            ValidationError: `petId` in the body differs from the stored reference.
            ForbiddenError: caller is neither the pet's owner nor an admin.
        """
        request = await self.get_request(db, request_id)
        if payload.pet_id is not None and payload.pet_id != request.pet_id:
            raise ValidationError(
                message="petId does not match the pet referenced by this request",
                field="petId",
            )

        pet = await pet_service.get_pet(db, request.pet_id)
        await authorization_service.require_owner_or_admin(
            db, actor, pet.added_by, action="decide on this adoption request"
        )

        request.status = payload.status
        pet.adoption_status = ADOPTED
        await db.flush()

        logger.info(
            "Adoption request %s set to %r by %s; pet %s marked adopted",
            request.id, payload.status, actor.email, pet.id,
        )
        return request

    async def delete_request(
        self, db: AsyncSession, request_id: uuid.UUID, actor: Identity
    ) -> None:
        request = await self.get_request(db, request_id)
        pet_owner = await db.scalar(select(Pet.added_by).where(Pet.id == request.pet_id))
        await authorization_service.require_owner_or_admin(
            db, actor, request.requester_email, pet_owner, action="delete this adoption request"
        )
        await db.delete(request)
        await db.flush()
        logger.info("Adoption request %s deleted by %s", request_id, actor.email)


adoption_service = AdoptionService()
