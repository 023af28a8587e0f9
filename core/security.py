# app/core/security.py
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth, credentials
from jose import jwt, JWTError

from core.config import settings



class InvalidCredential(Exception):
    """The identity provider rejected the bearer credential."""


class IdentityVerifier:
    """Turns a bearer credential into a verified principal email."""

    async def verify(self, token: str) -> str:
        raise NotImplementedError


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens with the Admin SDK."""

    def __init__(self, credentials_path: Optional[str] = None, app_name: str = "[DEFAULT]"):
        self.credentials_path = credentials_path
        self.app_name = app_name
        self._app = None
        self._lock = threading.Lock()

    def _get_app(self):
        with self._lock:
            if self._app is None:
                try:
                    self._app = firebase_admin.get_app(self.app_name)
                except ValueError:
                    cred = credentials.Certificate(self.credentials_path) if self.credentials_path else None
                    self._app = firebase_admin.initialize_app(cred, name=self.app_name)
            return self._app

    def _verify_sync(self, token: str) -> dict:
        return auth.verify_id_token(token, app=self._get_app())

    async def verify(self, token: str) -> str:
        try:
            decoded = await run_in_threadpool(self._verify_sync, token)
        except (ValueError, auth.InvalidIdTokenError, auth.UserDisabledError) as e:
            raise InvalidCredential(str(e)) from e

        email = decoded.get("email")
        if not email:
            raise InvalidCredential("Token carries no email")
        return email


class JWTIdentityVerifier(IdentityVerifier):
    """HS256 tokens signed with SECRET_KEY, for local development and tests."""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidCredential(str(e)) from e

        if payload.get("type") != "access":
            raise InvalidCredential("Not an access token")

        email = payload.get("email") or payload.get("sub")
        if not email:
            raise InvalidCredential("Token carries no email")
        return email


def create_access_token(email: str, expires_minutes: int = None, extra_data: dict = None,
                        secret_key: str = None, algorithm: str = None) -> str:
    """Mint an access token accepted by JWTIdentityVerifier."""
    if expires_minutes is None:
        expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    now = datetime.now(timezone.utc)
    payload = {
        "sub": email,
        "email": email,
        "exp": now + timedelta(minutes=expires_minutes),
        "iat": now,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }

    if extra_data:
        payload.update(extra_data)

    return jwt.encode(
        payload,
        secret_key or settings.SECRET_KEY,
        algorithm=algorithm or settings.ALGORITHM,
    )


def build_identity_verifier() -> IdentityVerifier:
    provider = settings.IDENTITY_PROVIDER.lower()
    if provider == "jwt":
        return JWTIdentityVerifier(settings.SECRET_KEY, settings.ALGORITHM)
    if provider == "firebase":
        return FirebaseIdentityVerifier(settings.FIREBASE_CREDENTIALS)
    raise ValueError(f"Unknown identity provider: {settings.IDENTITY_PROVIDER}")
