"""
User endpoints: sign-in upsert, profile access, admin role/status management
and the public donor search.
"""

import uuid

import pytest
from sqlalchemy import select

from models.user import User


@pytest.mark.asyncio
async def test_add_user_creates_active_donor(client, session_factory):
    res = await client.post("/add-user", json={
        "email": "new@x.com",
        "name": "New Donor",
        "photo_url": "https://img.example.com/n.png",
        "blood_group": "AB-",
        "district": "Sylhet",
    })

    assert res.status_code == 200
    data = res.json()
    assert data["created"] is True
    assert data["user"]["role"] == "donor"
    assert data["user"]["status"] == "active"
    assert data["user"]["login_count"] == 1
    assert data["user"]["blood_group"] == "AB-"


@pytest.mark.asyncio
async def test_add_user_existing_counts_login(client):
    await client.post("/add-user", json={"email": "new@x.com", "name": "Old Name"})

    res = await client.post("/add-user", json={"email": "new@x.com", "name": "New Name"})
    assert res.json()["created"] is False
    assert res.json()["user"]["login_count"] == 2
    assert res.json()["user"]["name"] == "New Name"

    res = await client.post("/add-user", json={"email": "new@x.com"})
    assert res.json()["user"]["login_count"] == 3
    assert res.json()["user"]["name"] == "New Name"


@pytest.mark.asyncio
async def test_add_user_cannot_set_role_or_status(client, session_factory):
    res = await client.post("/add-user", json={
        "email": "sneaky@x.com", "role": "admin", "status": "active",
    })
    assert res.status_code == 200

    async with session_factory() as session:
        user = (await session.execute(select(User).where(User.email == "sneaky@x.com"))).scalar_one()
        assert user.role == "donor"


@pytest.mark.asyncio
async def test_add_user_requires_valid_email(client):
    res = await client.post("/add-user", json={"name": "No Email"})
    assert res.status_code == 400
    res = await client.post("/add-user", json={"email": "not-an-email"})
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_get_user_role(client, auth, make_user):
    await make_user("v@x.com", role="volunteer")

    res = await client.get("/get-user-role", headers=auth("v@x.com"))

    assert res.status_code == 200
    assert res.json() == {"role": "volunteer", "status": "active"}


@pytest.mark.asyncio
async def test_get_own_profile(client, auth, make_user):
    await make_user("a@x.com", district="Khulna")

    res = await client.get("/users/a@x.com", headers=auth("a@x.com"))

    assert res.status_code == 200
    assert res.json()["district"] == "Khulna"


@pytest.mark.asyncio
async def test_get_other_profile_requires_admin(client, auth, make_user):
    await make_user("a@x.com")
    await make_user("b@x.com")
    await make_user("v@x.com", role="volunteer")
    await make_user("admin@x.com", role="admin")

    assert (await client.get("/users/a@x.com", headers=auth("b@x.com"))).status_code == 403
    assert (await client.get("/users/a@x.com", headers=auth("v@x.com"))).status_code == 403
    assert (await client.get("/users/a@x.com", headers=auth("admin@x.com"))).status_code == 200
    assert (await client.get("/users/ghost@x.com", headers=auth("admin@x.com"))).status_code == 404


@pytest.mark.asyncio
async def test_update_own_profile(client, auth, make_user):
    await make_user("a@x.com")

    res = await client.patch(
        "/users/a@x.com",
        json={"blood_group": "O+", "district": "Rajshahi", "upazila": "Boalia", "phone": "01700000000"},
        headers=auth("a@x.com"),
    )

    assert res.status_code == 200
    data = res.json()
    assert data["blood_group"] == "O+"
    assert data["upazila"] == "Boalia"


@pytest.mark.asyncio
async def test_update_profile_cannot_touch_role(client, auth, make_user):
    await make_user("a@x.com")

    res = await client.patch("/users/a@x.com", json={"role": "admin"}, headers=auth("a@x.com"))

    assert res.status_code == 400
    res = await client.get("/get-user-role", headers=auth("a@x.com"))
    assert res.json()["role"] == "donor"


@pytest.mark.asyncio
async def test_update_other_profile_forbidden_even_for_admin(client, auth, make_user):
    await make_user("a@x.com")
    await make_user("admin@x.com", role="admin")

    res = await client.patch("/users/a@x.com", json={"name": "X"}, headers=auth("admin@x.com"))

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_get_users_admin_only(client, auth, make_user):
    await make_user("a@x.com")
    await make_user("v@x.com", role="volunteer")
    await make_user("admin@x.com", role="admin")

    assert (await client.get("/get-users", headers=auth("v@x.com"))).status_code == 403

    res = await client.get("/get-users", headers=auth("admin@x.com"))
    assert res.status_code == 200
    emails = {u["email"] for u in res.json()}
    assert emails == {"a@x.com", "v@x.com"}


@pytest.mark.asyncio
async def test_get_users_status_filter(client, auth, make_user):
    await make_user("a@x.com")
    await make_user("b@x.com", status="blocked")
    await make_user("admin@x.com", role="admin")

    res = await client.get("/get-users?status=blocked", headers=auth("admin@x.com"))

    assert [u["email"] for u in res.json()] == ["b@x.com"]


@pytest.mark.asyncio
async def test_role_change_applies_on_next_request(client, auth, make_user):
    user_a = await make_user("a@x.com")
    await make_user("admin@x.com", role="admin")

    assert (await client.get("/get-users", headers=auth("a@x.com"))).status_code == 403

    res = await client.patch(
        f"/update-users/role/{user_a.uuid}", json={"role": "admin"}, headers=auth("admin@x.com")
    )
    assert res.status_code == 200
    assert res.json()["role"] == "admin"

    assert (await client.get("/get-users", headers=auth("a@x.com"))).status_code == 200


@pytest.mark.asyncio
async def test_update_role_validation(client, auth, make_user):
    user_a = await make_user("a@x.com")
    await make_user("admin@x.com", role="admin")

    res = await client.patch(
        f"/update-users/role/{user_a.uuid}", json={"role": "superuser"}, headers=auth("admin@x.com")
    )
    assert res.status_code == 400

    res = await client.patch(
        "/update-users/role/not-a-uuid", json={"role": "volunteer"}, headers=auth("admin@x.com")
    )
    assert res.status_code == 400

    res = await client.patch(
        f"/update-users/role/{uuid.uuid4()}", json={"role": "volunteer"}, headers=auth("admin@x.com")
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_update_status_requires_admin(client, auth, make_user):
    user_a = await make_user("a@x.com")
    await make_user("v@x.com", role="volunteer")

    res = await client.patch(
        f"/update-users/status/{user_a.uuid}", json={"status": "blocked"}, headers=auth("v@x.com")
    )

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_search_donors(client, make_user):
    await make_user("a@x.com", blood_group="A+", district="Dhaka", upazila="Savar")
    await make_user("b@x.com", blood_group="A+", district="Dhaka", upazila="Mirpur")
    await make_user("c@x.com", blood_group="B+", district="Dhaka", upazila="Savar")
    await make_user("blocked@x.com", blood_group="A+", district="Dhaka", status="blocked")
    await make_user("v@x.com", role="volunteer", blood_group="A+", district="Dhaka")

    res = await client.get("/search-donors", params={"blood_group": "A+", "district": "Dhaka"})

    assert res.status_code == 200
    assert {d["email"] for d in res.json()} == {"a@x.com", "b@x.com"}
    assert "phone" not in res.json()[0]
    assert "role" not in res.json()[0]

    res = await client.get("/search-donors", params={"blood_group": "A+", "upazila": "Savar"})
    assert [d["email"] for d in res.json()] == ["a@x.com"]


@pytest.mark.asyncio
async def test_search_donors_rejects_unknown_blood_group(client):
    res = await client.get("/search-donors", params={"blood_group": "Z"})
    assert res.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_email", ["not-an-email", "a@", "@x.com"])
async def test_profile_path_rejects_malformed_email(client, auth, make_user, bad_email):
    await make_user("admin@x.com", role="admin")

    res = await client.get(f"/users/{bad_email}", headers=auth("admin@x.com"))
    assert res.status_code == 400

    res = await client.patch(f"/users/{bad_email}", json={"name": "X"}, headers=auth("admin@x.com"))
    assert res.status_code == 400
