"""
United Pets Backend — Donation Route Tests
===========================================

What we test:
    ✅ Campaigns start at total 0 with no donators; protected fields not patchable
    ✅ Donate 10 → total +10 and one donator entry; refund restores the total
    ✅ Duplicate (email, amount) donations: a refund removes exactly one entry
    ✅ Refund without a matching donation → 404; on behalf of others → admin only
    ✅ Paused campaigns reject donations
    ✅ Out-of-range amounts are rejected; totals grow past the 32-bit range
    ✅ Donation history per user; browse and similar listings
"""

import pytest

from conftest import ALICE, CAROL, auth


async def create_campaign(client, token="bob-token", **fields):
    body = {"petName": "Rex", "petCategory": "Dog", **fields}
    response = await client.post("/donations", json=body, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()


async def donate(client, campaign_id, amount, token="alice-token", **snapshot):
    return await client.post(
        f"/donate/{campaign_id}", json={"amount": amount, **snapshot}, headers=auth(token)
    )


class TestCampaigns:

    @pytest.mark.asyncio
    async def test_new_campaign_is_empty(self, client):
        campaign = await create_campaign(client, maxAmount=500, totalDonated=999, donators=[{"x": 1}])

        assert campaign["totalDonated"] == 0
        assert campaign["donators"] == []
        assert campaign["paused"] is False
        assert campaign["maxAmount"] == 500

    @pytest.mark.asyncio
    async def test_update_cannot_touch_money_or_owner(self, client):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 5)

        response = await client.put(
            f"/donations/{campaign['id']}",
            json={"petName": "Rexy", "totalDonated": 0, "addedBy": ALICE, "shortDescription": "Good boy"},
            headers=auth("bob-token"),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["petName"] == "Rexy"
        assert body["totalDonated"] == 5
        assert body["addedBy"] == "bob@example.com"
        assert body["shortDescription"] == "Good boy"

    @pytest.mark.asyncio
    async def test_stranger_cannot_update_pause_or_delete(self, client):
        campaign = await create_campaign(client)
        cid = campaign["id"]

        update = await client.put(f"/donations/{cid}", json={"petName": "X"}, headers=auth("alice-token"))
        pause = await client.patch(f"/donations/{cid}/status", json={"paused": True}, headers=auth("alice-token"))
        delete = await client.delete(f"/donations/{cid}", headers=auth("alice-token"))

        assert [update.status_code, pause.status_code, delete.status_code] == [403, 403, 403]

    @pytest.mark.asyncio
    async def test_owner_deletes_campaign(self, client):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 5)

        response = await client.delete(f"/donations/{campaign['id']}", headers=auth("bob-token"))

        assert response.status_code == 200
        assert (await client.get(f"/donations/{campaign['id']}")).status_code == 404
        history = await client.get("/user-donation", headers=auth("alice-token"))
        assert history.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_browse_and_similar(self, client):
        rex = await create_campaign(client, petName="Rex", petCategory="Dog")
        await create_campaign(client, petName="Fido", petCategory="dog")
        await create_campaign(client, token="alice-token", petName="Tom", petCategory="Cat")

        bobs = await client.get("/donations", params={"addedBy": "bob@example.com"})
        cats = await client.get("/donations", params={"category": "CAT"})
        similar = await client.get("/donations/similar", params={"category": "Dog", "excludeId": rex["id"]})

        assert bobs.json()["total"] == 2
        assert [c["petName"] for c in cats.json()["items"]] == ["Tom"]
        assert [c["petName"] for c in similar.json()] == ["Fido"]


class TestDonateAndRefund:

    @pytest.mark.asyncio
    async def test_donate_then_refund_restores_total(self, client):
        campaign = await create_campaign(client)

        donated = await donate(client, campaign["id"], 10, petImage="https://img/rex.png")
        assert donated.status_code == 200
        assert donated.json()["totalDonated"] == 10
        assert [(d["email"], d["donatedAmount"]) for d in donated.json()["donators"]] == [(ALICE, 10)]

        refunded = await client.post(
            f"/donation/{campaign['id']}/refund", json={"amount": 10}, headers=auth("alice-token")
        )
        assert refunded.status_code == 200
        assert refunded.json()["totalDonated"] == 0
        assert refunded.json()["donators"] == []

    @pytest.mark.asyncio
    async def test_refund_removes_exactly_one_matching_entry(self, client):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 10)
        await donate(client, campaign["id"], 10)
        await donate(client, campaign["id"], 2.5, token="carol-token")

        response = await client.post(
            f"/donation/{campaign['id']}/refund", json={"amount": 10}, headers=auth("alice-token")
        )

        body = response.json()
        assert body["totalDonated"] == 12.5
        assert sorted((d["email"], d["donatedAmount"]) for d in body["donators"]) == [
            (ALICE, 10),
            (CAROL, 2.5),
        ]
        history = await client.get("/user-donation", headers=auth("alice-token"))
        assert history.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_total_matches_sum_of_donators(self, client):
        campaign = await create_campaign(client)
        for amount, token in [(10, "alice-token"), (0.1, "carol-token"), (0.2, "alice-token"), (19.99, "bob-token")]:
            await donate(client, campaign["id"], amount, token=token)

        body = (await client.get(f"/donations/{campaign['id']}")).json()

        cents = sum(round(d["donatedAmount"] * 100) for d in body["donators"])
        assert round(body["totalDonated"] * 100) == cents == 3029

    @pytest.mark.asyncio
    async def test_refund_without_matching_donation_is_404(self, client):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 10)

        response = await client.post(
            f"/donation/{campaign['id']}/refund", json={"amount": 7}, headers=auth("alice-token")
        )

        assert response.status_code == 404
        stored = (await client.get(f"/donations/{campaign['id']}")).json()
        assert stored["totalDonated"] == 10
        assert len(stored["donators"]) == 1

    @pytest.mark.asyncio
    async def test_refund_for_another_user_requires_admin(self, client, admin_user):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 10)

        denied = await client.post(
            f"/donation/{campaign['id']}/refund",
            json={"amount": 10, "userEmail": ALICE},
            headers=auth("carol-token"),
        )
        allowed = await client.post(
            f"/donation/{campaign['id']}/refund",
            json={"amount": 10, "userEmail": ALICE},
            headers=auth("admin-token"),
        )

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["totalDonated"] == 0

    @pytest.mark.asyncio
    async def test_paused_campaign_rejects_donations(self, client):
        campaign = await create_campaign(client)
        paused = await client.patch(
            f"/donations/{campaign['id']}/status", json={"paused": True}, headers=auth("bob-token")
        )
        assert paused.json()["paused"] is True

        response = await donate(client, campaign["id"], 10)

        assert response.status_code == 400
        assert (await client.get(f"/donations/{campaign['id']}")).json()["totalDonated"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5, "ten", 1e20, 1e30])
    async def test_invalid_amount_is_400(self, client, amount):
        campaign = await create_campaign(client)

        response = await donate(client, campaign["id"], amount)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_donation_history_keeps_snapshot(self, client):
        campaign = await create_campaign(client)
        await donate(client, campaign["id"], 15, petName="Rex", petImage="https://img/rex.png")

        response = await client.get("/user-donation", headers=auth("alice-token"))

        item = response.json()["items"][0]
        assert item["donationId"] == campaign["id"]
        assert item["amount"] == 15
        assert item["petImage"] == "https://img/rex.png"

    @pytest.mark.asyncio
    async def test_refund_of_huge_amount_is_400(self, client):
        campaign = await create_campaign(client)

        response = await client.post(
            f"/donation/{campaign['id']}/refund", json={"amount": 1e30}, headers=auth("alice-token")
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_total_grows_past_32_bit_cents(self, client):
        campaign = await create_campaign(client)
        for _ in range(22):
            response = await donate(client, campaign["id"], 1_000_000)
            assert response.status_code == 200

        body = (await client.get(f"/donations/{campaign['id']}")).json()

        assert body["totalDonated"] == 22_000_000
