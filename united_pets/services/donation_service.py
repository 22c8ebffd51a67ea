"""
United Pets Backend — Donation Service
=======================================

What:  Donation campaigns (CRUD, pause toggle, browsing) and the money
       operations on them: donate, refund, per-user donation history.

Donate / Refund Flow (one transaction each, see Database.session):
    ┌──────────────┐     ┌──────────────────────────────────────────┐
    │ Donate 10.00 │────▶│ UPDATE total = total + 1000              │
    └──────────────┘     │ INSERT campaign_donators (email, 1000)   │
                         │ INSERT user_donations   (email, 1000)    │
                         └──────────────────────────────────────────┘
    ┌──────────────┐     ┌──────────────────────────────────────────┐
    │ Refund 10.00 │────▶│ DELETE newest matching user_donations    │
    └──────────────┘     │ DELETE newest matching campaign_donators │
                         │ UPDATE total = total - 1000              │
                         └──────────────────────────────────────────┘
    Any failure rolls the whole request back, so the total always equals
    the sum of the donator entries.

Refund matching:
    Exact (email, amount) pairs only. If a donor gave 10 twice, one refund of
    10 removes exactly one entry (the most recent).
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import ConflictError, NotFoundError, ValidationError
from united_pets.models.donation import CampaignDonator, DonationCampaign, UserDonation
from united_pets.money import to_cents
from united_pets.schemas.common import strip_keys
from united_pets.schemas.donation import (
    CampaignCreate,
    CampaignUpdate,
    DonateRequest,
    RefundRequest,
)
from united_pets.services.adapter_base import Identity
from united_pets.services.authorization_service import authorization_service
from united_pets.services.query import PageRequest, PageResult, contains_ci, paginate
from united_pets.services.user_service import normalize_email

logger = logging.getLogger(__name__)

PROTECTED_CAMPAIGN_FIELDS = {
    "id",
    "added_by",
    "pet_name",
    "pet_category",
    "total_donated",
    "total_donated_cents",
    "paused",
    "donators",
    "created_at",
}

PROTECTED_DONATION_FIELDS = {"id", "donation_id", "user_email", "amount", "created_at"}


class DonationService:

    # ── Campaigns ─────────────────────────────────────────────────────────

    async def create_campaign(
        self, db: AsyncSession, payload: CampaignCreate, owner: Identity
    ) -> DonationCampaign:
        campaign = DonationCampaign(
            added_by=owner.email,
            pet_name=payload.pet_name,
            pet_category=payload.pet_category,
            total_donated_cents=0,
            paused=False,
            details=strip_keys(payload.extra_fields(), PROTECTED_CAMPAIGN_FIELDS),
            donators=[],
        )
        db.add(campaign)
        await db.flush()
        logger.info("Campaign %s for %s created by %s", campaign.id, campaign.pet_name, owner.email)
        return campaign

    async def get_campaign(self, db: AsyncSession, campaign_id: uuid.UUID) -> DonationCampaign:
        campaign = await db.get(DonationCampaign, campaign_id)
        if campaign is None:
            raise NotFoundError(resource="donation campaign", resource_id=str(campaign_id))
        return campaign

    async def update_campaign(
        self,
        db: AsyncSession,
        campaign_id: uuid.UUID,
        payload: CampaignUpdate,
        actor: Identity,
    ) -> DonationCampaign:
        """Patch descriptive fields. Total, donators and owner are never patchable."""
        campaign = await self.get_campaign(db, campaign_id)
        await authorization_service.require_owner_or_admin(
            db, actor, campaign.added_by, action="update this campaign"
        )

        if payload.pet_name is not None:
            campaign.pet_name = payload.pet_name
        if payload.pet_category is not None:
            campaign.pet_category = payload.pet_category

        extra = strip_keys(payload.extra_fields(), PROTECTED_CAMPAIGN_FIELDS)
        if extra:
            campaign.details = {**(campaign.details or {}), **extra}

        await db.flush()
        return campaign

    async def set_paused(
        self, db: AsyncSession, campaign_id: uuid.UUID, paused: bool, actor: Identity
    ) -> DonationCampaign:
        campaign = await self.get_campaign(db, campaign_id)
        await authorization_service.require_owner_or_admin(
            db, actor, campaign.added_by, action="pause or resume this campaign"
        )
        campaign.paused = paused
        await db.flush()
        logger.info("Campaign %s %s by %s", campaign.id, "paused" if paused else "resumed", actor.email)
        return campaign

    async def delete_campaign(
        self, db: AsyncSession, campaign_id: uuid.UUID, actor: Identity
    ) -> None:
        campaign = await self.get_campaign(db, campaign_id)
        await authorization_service.require_owner_or_admin(
            db, actor, campaign.added_by, action="delete this campaign"
        )
        await db.execute(delete(UserDonation).where(UserDonation.donation_id == campaign.id))
        await db.delete(campaign)
        await db.flush()
        logger.info("Campaign %s deleted by %s", campaign_id, actor.email)

    async def list_campaigns(
        self,
        db: AsyncSession,
        page: PageRequest,
        added_by: Optional[str] = None,
        category: Optional[str] = None,
    ) -> PageResult[DonationCampaign]:
        query = select(DonationCampaign)
        if added_by:
            query = query.where(DonationCampaign.added_by == normalize_email(added_by))
        if category:
            query = query.where(contains_ci(DonationCampaign.pet_category, category))
        query = query.order_by(DonationCampaign.created_at.desc(), DonationCampaign.id.asc())
        return await paginate(db, query, page)

    async def similar_campaigns(
        self,
        db: AsyncSession,
        category: str,
        exclude_id: Optional[uuid.UUID] = None,
        limit: int = 3,
    ) -> List[DonationCampaign]:
        query = select(DonationCampaign).where(contains_ci(DonationCampaign.pet_category, category))
        if exclude_id is not None:
            query = query.where(DonationCampaign.id != exclude_id)
        query = query.order_by(DonationCampaign.created_at.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    # ── Money ─────────────────────────────────────────────────────────────

    async def donate(
        self,
        db: AsyncSession,
        campaign_id: uuid.UUID,
        payload: DonateRequest,
        donor: Identity,
    ) -> DonationCampaign:
        """
        Record a donation against a campaign.

        Raises:
            NotFoundError: unknown campaign.
            ValidationError: campaign paused, or amount not a positive
                two-decimal value.
        """
        cents = to_cents(payload.amount)
        campaign = await self.get_campaign(db, campaign_id)
        if campaign.paused:
            raise ValidationError(message="This campaign is paused and not accepting donations")

        campaign.total_donated_cents = DonationCampaign.total_donated_cents + cents
        campaign.donators.append(CampaignDonator(email=donor.email, amount_cents=cents))
        db.add(
            UserDonation(
                donation_id=campaign.id,
                user_email=donor.email,
                amount_cents=cents,
                details=strip_keys(payload.extra_fields(), PROTECTED_DONATION_FIELDS),
            )
        )
        await db.flush()
        # The increment ran in SQL; load the resulting value
        await db.refresh(campaign, ["total_donated_cents"])

        logger.info("Donation of %d cents to campaign %s by %s", cents, campaign.id, donor.email)
        return campaign

    async def refund(
        self,
        db: AsyncSession,
        campaign_id: uuid.UUID,
        payload: RefundRequest,
        actor: Identity,
    ) -> DonationCampaign:
        """
        Reverse one donation of exactly `amount` by the target donor.

        The target is `userEmail` when given, otherwise the caller. Refunding
        someone else's donation requires admin.

        Raises:
            ForbiddenError: non-admin refunding another user's donation.
            NotFoundError: unknown campaign, or no matching donation record.
            ConflictError: record exists but the campaign has no matching
                donator entry; nothing is changed.
        """
        cents = to_cents(payload.amount)
        target = normalize_email(str(payload.user_email)) if payload.user_email else actor.email
        if target != actor.email:
            await authorization_service.require_admin(db, actor)

        campaign = await self.get_campaign(db, campaign_id)

        record = await db.scalar(
            select(UserDonation)
            .where(
                UserDonation.donation_id == campaign.id,
                UserDonation.user_email == target,
                UserDonation.amount_cents == cents,
            )
            .order_by(UserDonation.created_at.desc())
            .limit(1)
        )
        if record is None:
            raise NotFoundError(
                resource="donation",
                context={"campaign_id": str(campaign.id), "user_email": target, "amount_cents": cents},
            )

        donator = next(
            (
                entry
                for entry in reversed(campaign.donators)
                if entry.email == target and entry.amount_cents == cents
            ),
            None,
        )
        if donator is None:
            logger.error(
                "Campaign %s has a donation record for %s (%d cents) but no donator entry",
                campaign.id, target, cents,
            )
            raise ConflictError(
                message="Donation record does not match the campaign's donators",
                context={"campaign_id": str(campaign.id)},
            )

        campaign.donators.remove(donator)
        campaign.total_donated_cents = DonationCampaign.total_donated_cents - cents
        await db.delete(record)
        await db.flush()
        await db.refresh(campaign, ["total_donated_cents"])

        logger.info("Refunded %d cents on campaign %s to %s (by %s)", cents, campaign.id, target, actor.email)
        return campaign

    async def list_user_donations(self, db: AsyncSession, donor: Identity) -> List[UserDonation]:
        result = await db.execute(
            select(UserDonation)
            .where(UserDonation.user_email == donor.email)
            .order_by(UserDonation.created_at.desc())
        )
        return list(result.scalars().all())


donation_service = DonationService()
