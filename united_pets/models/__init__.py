"""
ORM models. Importing this package registers every table with `Base.metadata`
(used by `Database.create_schema()` and Alembic autogenerate).
"""

from united_pets.models.adoption_request import AdoptionRequest
from united_pets.models.donation import CampaignDonator, DonationCampaign, UserDonation
from united_pets.models.pet import ADOPTED, NOT_ADOPTED, Pet
from united_pets.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "ADOPTED",
    "NOT_ADOPTED",
    "ROLE_ADMIN",
    "ROLE_USER",
    "AdoptionRequest",
    "CampaignDonator",
    "DonationCampaign",
    "Pet",
    "User",
    "UserDonation",
]
