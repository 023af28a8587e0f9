"""
Bearer credential verification.
"""

import pytest
from jose import jwt

from core.security import InvalidCredential, JWTIdentityVerifier, create_access_token
from tests.conftest import TEST_SECRET


@pytest.fixture
def verifier():
    return JWTIdentityVerifier(TEST_SECRET)


@pytest.mark.asyncio
async def test_valid_token_yields_email(verifier):
    token = create_access_token("a@x.com", secret_key=TEST_SECRET, algorithm="HS256")
    assert await verifier.verify(token) == "a@x.com"


@pytest.mark.asyncio
async def test_expired_token_rejected(verifier):
    token = create_access_token("a@x.com", expires_minutes=-1, secret_key=TEST_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredential):
        await verifier.verify(token)


@pytest.mark.asyncio
async def test_wrong_secret_rejected(verifier):
    token = create_access_token("a@x.com", secret_key="another_secret", algorithm="HS256")
    with pytest.raises(InvalidCredential):
        await verifier.verify(token)


@pytest.mark.asyncio
async def test_non_access_token_rejected(verifier):
    token = create_access_token(
        "a@x.com", extra_data={"type": "refresh"}, secret_key=TEST_SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidCredential):
        await verifier.verify(token)


@pytest.mark.asyncio
async def test_token_without_email_rejected(verifier):
    token = jwt.encode({"type": "access"}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredential):
        await verifier.verify(token)


@pytest.mark.asyncio
async def test_garbage_token_is_401(client):
    res = await client.get("/get-user-role", headers={"Authorization": "Bearer not.a.token"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_registered_check_is_403(client, auth):
    res = await client.get("/get-user-role", headers=auth("ghost@x.com"))
    assert res.status_code == 403
