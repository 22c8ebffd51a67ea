"""
United Pets Backend — Mail Route
=================================

What:  POST /send-mail, used by the web client for adoption and donation
       notifications. The sender is always the configured platform address;
       callers choose only the recipient, subject and HTML body.
"""

import logging

from fastapi import APIRouter, Depends

from united_pets.config import settings
from united_pets.routes.dependencies import get_current_identity, get_mailer
from united_pets.schemas.common import ErrorResponse
from united_pets.schemas.integrations import MailRequest, MailResponse
from united_pets.services.adapter_base import Identity, Mailer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Mail"])


@router.post(
    "/send-mail",
    response_model=MailResponse,
    responses={500: {"description": "Mail could not be sent", "model": ErrorResponse}},
    summary="Send a notification e-mail",
)
async def send_mail(
    payload: MailRequest,
    identity: Identity = Depends(get_current_identity),
    mailer: Mailer = Depends(get_mailer),
) -> MailResponse:
    to = str(payload.to)
    logger.info("Mail to %s requested by %s", to, identity.email)
    await mailer.send(settings.mail_sender, to, payload.subject, payload.html)
    return MailResponse(to=to)
