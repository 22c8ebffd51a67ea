"""
Donation campaign and user donation schemas.

Amounts are decimal major units on the wire (`10.5`) and integer cents in the
database; conversion happens in `united_pets.money`.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from united_pets.config import settings
from united_pets.models.donation import CampaignDonator, DonationCampaign, UserDonation
from united_pets.money import from_cents
from united_pets.schemas.common import CamelModel, OpenDocument


class CampaignCreate(OpenDocument):
    pet_name: str = Field(min_length=1, max_length=200)
    pet_category: str = Field(min_length=1, max_length=100)


class CampaignUpdate(OpenDocument):
    pet_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    pet_category: Optional[str] = Field(default=None, min_length=1, max_length=100)


class CampaignStatusUpdate(CamelModel):
    paused: bool


class DonatorEntry(CamelModel):
    email: str
    donated_amount: float
    date: datetime

    @classmethod
    def from_model(cls, donator: CampaignDonator) -> "DonatorEntry":
        return cls(
            email=donator.email,
            donated_amount=from_cents(donator.amount_cents),
            date=donator.date,
        )


class CampaignResponse(OpenDocument):
    id: uuid.UUID
    added_by: str
    pet_name: str
    pet_category: str
    total_donated: float
    paused: bool
    donators: List[DonatorEntry]
    created_at: datetime

    @classmethod
    def from_model(cls, campaign: DonationCampaign) -> "CampaignResponse":
        return cls.model_validate(
            {
                **(campaign.details or {}),
                "id": campaign.id,
                "addedBy": campaign.added_by,
                "petName": campaign.pet_name,
                "petCategory": campaign.pet_category,
                "totalDonated": from_cents(campaign.total_donated_cents),
                "paused": campaign.paused,
                "donators": [DonatorEntry.from_model(d) for d in campaign.donators],
                "createdAt": campaign.created_at,
            }
        )


class CampaignPage(CamelModel):
    items: List[CampaignResponse]
    total: int
    has_more: bool


class DonateRequest(OpenDocument):
    """Amount plus an optional snapshot (pet name, image) kept on the user's record."""
    amount: float = Field(gt=0, le=settings.max_amount)


class RefundRequest(CamelModel):
    amount: float = Field(gt=0, le=settings.max_amount)
    # Admins may refund on behalf of a donor; everyone else refunds their own
    user_email: Optional[EmailStr] = None


class UserDonationResponse(OpenDocument):
    id: uuid.UUID
    donation_id: uuid.UUID
    user_email: str
    amount: float
    created_at: datetime

    @classmethod
    def from_model(cls, record: UserDonation) -> "UserDonationResponse":
        return cls.model_validate(
            {
                **(record.details or {}),
                "id": record.id,
                "donationId": record.donation_id,
                "userEmail": record.user_email,
                "amount": from_cents(record.amount_cents),
                "createdAt": record.created_at,
            }
        )


class UserDonationList(CamelModel):
    items: List[UserDonationResponse]
    total: int
