"""Adoption request schemas."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from united_pets.models.adoption_request import AdoptionRequest
from united_pets.schemas.common import CamelModel, OpenDocument


class AdoptionRequestCreate(OpenDocument):
    """`petId` plus whatever contact details the adopter fills in."""
    pet_id: uuid.UUID


class AdoptionStatusUpdate(CamelModel):
    status: str = Field(min_length=1, max_length=50)
    # Optional echo of the referenced pet; must match the stored reference
    pet_id: Optional[uuid.UUID] = None


class AdoptionRequestResponse(OpenDocument):
    id: uuid.UUID
    pet_id: uuid.UUID
    requester_email: str
    status: str
    created_at: datetime

    @classmethod
    def from_model(cls, request: AdoptionRequest) -> "AdoptionRequestResponse":
        return cls.model_validate(
            {
                **(request.details or {}),
                "id": request.id,
                "petId": request.pet_id,
                "requesterEmail": request.requester_email,
                "status": request.status,
                "createdAt": request.created_at,
            }
        )


class AdoptionRequestList(CamelModel):
    items: List[AdoptionRequestResponse]
    total: int
