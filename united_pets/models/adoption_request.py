"""
United Pets Backend — Adoption Request Model
=============================================

What:  ORM model for the `adoption_requests` table.
Why:   Links a requester to a pet; the pet's owner decides on it.

Ownership:
    pet_id is a reference, not ownership. The deciding owner is found by
    looking up Pet.added_by for the referenced pet.

Status is an open set ('pending', 'accepted', 'rejected', ...).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from united_pets.database import Base
from united_pets.models.types import JSONDocument, utcnow

STATUS_PENDING = "pending"


class AdoptionRequest(Base):
    __tablename__ = "adoption_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    requester_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    status: Mapped[str] = mapped_column(String(50), nullable=False, default=STATUS_PENDING)

    # Contact details and message supplied by the requester
    details: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<AdoptionRequest(id={self.id}, pet_id={self.pet_id}, status='{self.status}')>"
