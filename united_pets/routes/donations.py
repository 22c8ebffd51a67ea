"""
United Pets Backend — Donation Routes
======================================

Endpoints:
    POST   /donations                        auth         create a campaign
    GET    /donations                        public       paginated, ?addedBy= ?category=
    GET    /donations/similar                public       same category, newest 3
    GET    /donations/{campaignId}           public
    PUT    /donations/{campaignId}           owner/admin
    PATCH  /donations/{campaignId}/status    owner/admin  {"paused": true|false}
    DELETE /donations/{campaignId}           owner/admin
    POST   /donate/{campaignId}              auth         {"amount": 10, ...snapshot}
    POST   /donation/{campaignId}/refund     auth         {"amount": 10, "userEmail"?}
    GET    /user-donation                    auth         the caller's donations
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.config import settings
from united_pets.database import get_db_session
from united_pets.routes.dependencies import get_current_identity
from united_pets.schemas.common import DeleteResponse, ErrorResponse
from united_pets.schemas.donation import (
    CampaignCreate,
    CampaignPage,
    CampaignResponse,
    CampaignStatusUpdate,
    CampaignUpdate,
    DonateRequest,
    RefundRequest,
    UserDonationList,
    UserDonationResponse,
)
from united_pets.services.adapter_base import Identity
from united_pets.services.donation_service import donation_service
from united_pets.services.query import PageRequest

logger = logging.getLogger(__name__)

# Campaign CRUD lives under /donations; the money endpoints keep their own paths
router = APIRouter(tags=["Donations"])

_OWNER_ONLY = {
    403: {"description": "Not the owner or an admin", "model": ErrorResponse},
    404: {"description": "Campaign not found", "model": ErrorResponse},
}


# ══════════════════════════════════════════════════════════════════════════
# Campaigns
# ══════════════════════════════════════════════════════════════════════════

@router.post(
    "/donations",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a donation campaign",
)
async def create_campaign(
    payload: CampaignCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignResponse:
    campaign = await donation_service.create_campaign(db, payload, owner=identity)
    return CampaignResponse.from_model(campaign)


@router.get("/donations", response_model=CampaignPage, summary="Browse donation campaigns")
async def list_campaigns(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    added_by: Optional[str] = Query(default=None, alias="addedBy"),
    category: Optional[str] = Query(default=None, max_length=100),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignPage:
    result = await donation_service.list_campaigns(
        db, PageRequest(page=page, limit=limit), added_by=added_by, category=category
    )
    return CampaignPage(
        items=[CampaignResponse.from_model(c) for c in result.items],
        total=result.total,
        has_more=result.has_more,
    )


@router.get(
    "/donations/similar",
    response_model=list[CampaignResponse],
    summary="Campaigns in the same category",
)
async def similar_campaigns(
    category: str = Query(min_length=1, max_length=100),
    exclude_id: Optional[UUID] = Query(default=None, alias="excludeId"),
    limit: int = Query(default=3, ge=1, le=20),
    db: AsyncSession = Depends(get_db_session),
) -> list[CampaignResponse]:
    campaigns = await donation_service.similar_campaigns(
        db, category, exclude_id=exclude_id, limit=limit
    )
    return [CampaignResponse.from_model(c) for c in campaigns]


@router.get(
    "/donations/{campaign_id}",
    response_model=CampaignResponse,
    responses={404: {"description": "Campaign not found", "model": ErrorResponse}},
    summary="Get one campaign",
)
async def get_campaign(
    campaign_id: UUID, db: AsyncSession = Depends(get_db_session)
) -> CampaignResponse:
    campaign = await donation_service.get_campaign(db, campaign_id)
    return CampaignResponse.from_model(campaign)


@router.put(
    "/donations/{campaign_id}",
    response_model=CampaignResponse,
    responses=_OWNER_ONLY,
    summary="Update a campaign",
)
async def update_campaign(
    campaign_id: UUID,
    payload: CampaignUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignResponse:
    campaign = await donation_service.update_campaign(db, campaign_id, payload, actor=identity)
    return CampaignResponse.from_model(campaign)


@router.patch(
    "/donations/{campaign_id}/status",
    response_model=CampaignResponse,
    responses=_OWNER_ONLY,
    summary="Pause or resume a campaign",
)
async def set_campaign_status(
    campaign_id: UUID,
    payload: CampaignStatusUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignResponse:
    campaign = await donation_service.set_paused(db, campaign_id, payload.paused, actor=identity)
    return CampaignResponse.from_model(campaign)


@router.delete(
    "/donations/{campaign_id}",
    response_model=DeleteResponse,
    responses=_OWNER_ONLY,
    summary="Delete a campaign",
)
async def delete_campaign(
    campaign_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await donation_service.delete_campaign(db, campaign_id, actor=identity)
    return DeleteResponse(id=str(campaign_id))


# ══════════════════════════════════════════════════════════════════════════
# Donate / Refund / History
# ══════════════════════════════════════════════════════════════════════════

@router.post(
    "/donate/{campaign_id}",
    response_model=CampaignResponse,
    responses={
        400: {"description": "Invalid amount or campaign paused", "model": ErrorResponse},
        404: {"description": "Campaign not found", "model": ErrorResponse},
    },
    summary="Donate to a campaign",
)
async def donate(
    campaign_id: UUID,
    payload: DonateRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignResponse:
    campaign = await donation_service.donate(db, campaign_id, payload, donor=identity)
    return CampaignResponse.from_model(campaign)


@router.post(
    "/donation/{campaign_id}/refund",
    response_model=CampaignResponse,
    responses={
        400: {"description": "Records out of step; nothing changed", "model": ErrorResponse},
        403: {"description": "Refunding another user's donation requires admin", "model": ErrorResponse},
        404: {"description": "Campaign or matching donation not found", "model": ErrorResponse},
    },
    summary="Refund one donation",
)
async def refund(
    campaign_id: UUID,
    payload: RefundRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CampaignResponse:
    campaign = await donation_service.refund(db, campaign_id, payload, actor=identity)
    return CampaignResponse.from_model(campaign)


@router.get("/user-donation", response_model=UserDonationList, summary="My donations")
async def list_my_donations(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserDonationList:
    records = await donation_service.list_user_donations(db, donor=identity)
    return UserDonationList(
        items=[UserDonationResponse.from_model(r) for r in records],
        total=len(records),
    )
