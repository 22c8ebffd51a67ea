"""
United Pets Backend — User Route Tests
=======================================

What we test:
    ✅ Registration stores role 'user' even when the client sends another role
    ✅ Duplicate registration → 400 "user already exist", stored user unchanged
    ✅ Role lookup and /users/me
    ✅ SetRole: admin only, idempotent, 404 for unknown ids
"""

import uuid

import pytest

from conftest import ALICE, BOB, auth


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_assigns_default_role(self, client):
        response = await client.post(
            "/users",
            json={"email": "Bob@Example.com", "name": "Bob", "role": "admin", "photoURL": "https://img/b.png"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == BOB
        assert body["role"] == "user"
        assert body["photoURL"] == "https://img/b.png"

    @pytest.mark.asyncio
    async def test_duplicate_registration_is_rejected(self, client):
        first = await client.post("/users", json={"email": BOB, "name": "Bob"})
        second = await client.post("/users", json={"email": BOB.upper(), "name": "Impostor"})

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"] == "conflict"
        assert second.json()["message"] == "user already exist"

        me = await client.get("/users/me", headers=auth("bob-token"))
        assert me.json()["name"] == "Bob"
        assert me.json()["id"] == first.json()["id"]

    @pytest.mark.asyncio
    async def test_invalid_email_is_400(self, client):
        response = await client.post("/users", json={"email": "not-an-email"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestRoles:

    @pytest.mark.asyncio
    async def test_get_role(self, client):
        await client.post("/users", json={"email": ALICE})

        response = await client.get(f"/users/role/{ALICE}", headers=auth("bob-token"))

        assert response.status_code == 200
        assert response.json() == {"email": ALICE, "role": "user"}

    @pytest.mark.asyncio
    async def test_get_role_unknown_user_is_404(self, client):
        response = await client.get("/users/role/ghost@example.com", headers=auth("bob-token"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_non_admin_cannot_set_role(self, client, admin_user):
        created = await client.post("/users", json={"email": ALICE})
        await client.post("/users", json={"email": BOB})
        alice_id = created.json()["id"]

        response = await client.patch(
            f"/users/{alice_id}/role", json={"role": "admin"}, headers=auth("bob-token")
        )

        assert response.status_code == 403
        role = await client.get(f"/users/role/{ALICE}", headers=auth("admin-token"))
        assert role.json()["role"] == "user"

    @pytest.mark.asyncio
    async def test_admin_promotes_user(self, client, admin_user):
        created = await client.post("/users", json={"email": ALICE})
        alice_id = created.json()["id"]

        for _ in range(2):
            response = await client.patch(
                f"/users/{alice_id}/role", json={"role": "admin"}, headers=auth("admin-token")
            )
            assert response.status_code == 200
            assert response.json()["role"] == "admin"

        # The promoted account now passes the admin tier
        assert (await client.get("/users", headers=auth("alice-token"))).status_code == 200

    @pytest.mark.asyncio
    async def test_set_role_rejects_unknown_role(self, client, admin_user):
        created = await client.post("/users", json={"email": ALICE})

        response = await client.patch(
            f"/users/{created.json()['id']}/role", json={"role": "owner"}, headers=auth("admin-token")
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_set_role_unknown_user_is_404(self, client, admin_user):
        response = await client.patch(
            f"/users/{uuid.uuid4()}/role", json={"role": "admin"}, headers=auth("admin-token")
        )
        assert response.status_code == 404
