"""
Pet request/response schemas.

Only `name` and `category` are structured; every other field the client sends
(age, image, location, descriptions, ...) is kept as-is in `Pet.details`.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from united_pets.models.pet import Pet
from united_pets.schemas.common import CamelModel, OpenDocument


class PetCreate(OpenDocument):
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    added_time: Optional[datetime] = Field(
        default=None,
        description="Listing time; defaults to now",
    )


class PetUpdate(OpenDocument):
    """Named fields replace stored values; unnamed fields are left alone."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)


class PetResponse(OpenDocument):
    id: uuid.UUID
    name: str
    category: str
    added_by: str
    adoption_status: str
    added_time: datetime

    @classmethod
    def from_model(cls, pet: Pet) -> "PetResponse":
        return cls.model_validate(
            {
                **(pet.details or {}),
                "id": pet.id,
                "name": pet.name,
                "category": pet.category,
                "addedBy": pet.added_by,
                "adoptionStatus": pet.adoption_status,
                "addedTime": pet.added_time,
            }
        )


class PetPage(CamelModel):
    """One page of pets: `hasMore` is true while skip + len(items) < total."""
    items: List[PetResponse]
    total: int
    has_more: bool
