"""
United Pets Backend — Donation Models
======================================

What:  Donation campaigns, their ordered donator entries, and the per-user
       donation log.
Tables:
    donation_campaigns   one row per campaign (owner, pet, running total)
    campaign_donators    ordered entries {email, amount, date} per campaign
    user_donations       what each user gave, used for refunds and history

Invariant:
    donation_campaigns.total_donated_cents == SUM(campaign_donators.amount_cents)
    Donate and refund change the total, the donator entries and the user
    record in the same transaction (see DonationService).

Money is stored in integer minor units (cents) so the invariant is exact.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from united_pets.database import Base
from united_pets.models.types import JSONDocument, utcnow


class DonationCampaign(Base):
    __tablename__ = "donation_campaigns"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    added_by: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    pet_name: Mapped[str] = mapped_column(String(200), nullable=False)
    pet_category: Mapped[str] = mapped_column(String(100), nullable=False)

    # Accumulator; only ever changed with `total = total ± amount` statements
    total_donated_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    paused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Max amount, last date, descriptions, image, ...
    details: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    donators: Mapped[List["CampaignDonator"]] = relationship(
        back_populates="campaign",
        order_by="CampaignDonator.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_campaigns_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<DonationCampaign(id={self.id}, pet='{self.pet_name}', total={self.total_donated_cents})>"


class CampaignDonator(Base):
    """One donation as seen from the campaign. The integer id gives append order."""

    __tablename__ = "campaign_donators"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("donation_campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    campaign: Mapped[DonationCampaign] = relationship(back_populates="donators")


class UserDonation(Base):
    """One donation as seen from the donor; deleted again on refund."""

    __tablename__ = "user_donations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    donation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("donation_campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Snapshot of what the donor saw (pet name, image, ...)
    details: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
