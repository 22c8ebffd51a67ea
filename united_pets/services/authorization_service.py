"""
United Pets Backend — Authorization Gate
=========================================

What:  The single place that decides whether a verified identity may act.
Why:   Admin checks and "owner or admin" checks used to be repeated in every
       handler; here they are one function each, so every mutating route
       applies the same rule.
Who:   `require_admin` dependency (routes/dependencies.py) and the Pet,
       AdoptionRequest and DonationCampaign services.

Decision table:
    ┌──────────────────────┬───────────────────────────────────────────┐
    │ Tier                 │ ALLOW when                                │
    ├──────────────────────┼───────────────────────────────────────────┤
    │ public               │ always                                    │
    │ authenticated        │ verifier accepted the bearer token        │
    │ admin                │ users.role == 'admin' for the email       │
    │ owner-or-admin       │ email ∈ owner emails  OR  admin           │
    └──────────────────────┴───────────────────────────────────────────┘
    Authentication failures are decided earlier (dependencies.py); this
    service only ever raises ForbiddenError.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import ForbiddenError
from united_pets.models.user import ROLE_ADMIN, User
from united_pets.services.adapter_base import Identity

logger = logging.getLogger(__name__)


class AuthorizationService:

    async def get_role(self, db: AsyncSession, email: str) -> Optional[str]:
        """Stored role for `email`, or None when no user row exists."""
        return await db.scalar(select(User.role).where(User.email == email))

    async def is_admin(self, db: AsyncSession, identity: Identity) -> bool:
        return await self.get_role(db, identity.email) == ROLE_ADMIN

    async def require_admin(self, db: AsyncSession, identity: Identity) -> None:
        if not await self.is_admin(db, identity):
            logger.warning("Admin access denied for %s", identity.email)
            raise ForbiddenError(message="Admin access required")

    async def require_owner_or_admin(
        self,
        db: AsyncSession,
        identity: Identity,
        *owner_emails: Optional[str],
        action: str = "modify this resource",
    ) -> None:
        """
        Allow the call if the identity owns the resource or is an admin.

        Args:
            owner_emails: every email that counts as an owner for this action
                (e.g. requester AND pet owner when deleting an adoption request).
                None entries are ignored.
            action: phrase used in the error message.

        Raises:
            ForbiddenError: neither owner nor admin.
        """
        owners = {email for email in owner_emails if email}
        if identity.email in owners:
            return
        if await self.is_admin(db, identity):
            return
        logger.warning("Ownership check failed: %s tried to %s", identity.email, action)
        raise ForbiddenError(message=f"Only the owner or an admin can {action}")


authorization_service = AuthorizationService()
