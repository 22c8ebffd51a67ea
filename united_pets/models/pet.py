"""
United Pets Backend — Pet Model
================================

What:  ORM model for the `pets` table.
Who:   PetService (CRUD, listing) and AdoptionService (status coupling).

Adoption status lifecycle:
    'Not Adopted' ──(adopt endpoint | adoption request status update)──▶ 'Adopted'
    There is no way back: 'Adopted' → 'Not Adopted' is unsupported.

Query patterns:
    - Browse:   WHERE category ILIKE '%term%' ORDER BY added_time DESC OFFSET/LIMIT
    - Owner:    WHERE added_by = :email  (also the id-set for owner request listing)
    - Latest:   ORDER BY added_time DESC LIMIT 6
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from united_pets.database import Base
from united_pets.models.types import JSONDocument, utcnow

NOT_ADOPTED = "Not Adopted"
ADOPTED = "Adopted"
ADOPTION_STATUSES = (NOT_ADOPTED, ADOPTED)


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Owner email, taken from the verified identity at creation
    added_by: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    adoption_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NOT_ADOPTED
    )

    added_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Descriptive fields the API passes through untouched (age, image, location, ...)
    details: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_pets_added_time", added_time.desc()),
        Index("idx_pets_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', status='{self.adoption_status}')>"
