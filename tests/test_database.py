"""
United Pets Backend — Database Session Tests
=============================================

What we test:
    ✅ A session commits on success and rolls back on error
    ✅ SQLAlchemy failures surface as DatabaseError
    ✅ ping() reports connectivity
    ✅ Money columns are 64-bit integers
"""

import pytest
from sqlalchemy import BigInteger, func, select

from united_pets.exceptions import DatabaseError, NotFoundError
from united_pets.models import CampaignDonator, DonationCampaign, User, UserDonation


async def count_users(database) -> int:
    async with database.session() as session:
        return await session.scalar(select(func.count()).select_from(User))


class TestSession:

    @pytest.mark.asyncio
    async def test_commit_on_success(self, database):
        async with database.session() as session:
            session.add(User(email="alice@example.com", profile={}))

        assert await count_users(database) == 1

    @pytest.mark.asyncio
    async def test_rollback_on_application_error(self, database):
        with pytest.raises(NotFoundError):
            async with database.session() as session:
                session.add(User(email="alice@example.com", profile={}))
                await session.flush()
                raise NotFoundError(resource="pet", resource_id="x")

        assert await count_users(database) == 0

    @pytest.mark.asyncio
    async def test_integrity_failure_becomes_database_error(self, database):
        async with database.session() as session:
            session.add(User(email="alice@example.com", profile={}))

        with pytest.raises(DatabaseError) as exc_info:
            async with database.session() as session:
                session.add(User(email="alice@example.com", profile={}))

        assert exc_info.value.context["error_type"] == "IntegrityError"
        assert await count_users(database) == 1

    @pytest.mark.asyncio
    async def test_ping(self, database):
        assert await database.ping() is True


@pytest.mark.parametrize(
    "column",
    [
        DonationCampaign.__table__.c.total_donated_cents,
        CampaignDonator.__table__.c.amount_cents,
        UserDonation.__table__.c.amount_cents,
    ],
)
def test_money_columns_are_64_bit(column):
    assert isinstance(column.type, BigInteger)
