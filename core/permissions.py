# app/core/permissions.py
from typing import Iterable, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.dependencies import get_principal_email
from models.user import User
import logging
logger = logging.getLogger(__name__)

# Roles and status are always read from the users table on the request that
# needs them; nothing is cached and no role claim is read from the token.


async def load_user(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


def ensure_role(user: Optional[User], roles_allowed: Iterable[str]) -> None:
    """403 unless the loaded user holds one of the roles."""
    if user is None or user.role not in set(roles_allowed):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: insufficient role",
        )


async def require_owner_or_role(
        db: AsyncSession,
        principal_email: str,
        owner_email: str,
        roles_allowed: Iterable[str],
        detail: str = "Forbidden: Not authorized to access this resource",
) -> None:
    if principal_email == owner_email:
        return

    user = await load_user(db, principal_email)
    if user is None or user.role not in set(roles_allowed):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


async def get_current_user(
        email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db),
) -> User:
    user = await load_user(db, email)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: user is not registered",
        )
    return user


def require_roles(*roles_allowed):
    async def checker(
            email: str = Depends(get_principal_email),
            db: AsyncSession = Depends(get_db),
    ) -> User:
        user = await load_user(db, email)
        ensure_role(user, roles_allowed)
        return user
    return checker


async def require_not_blocked(user: User = Depends(get_current_user)) -> User:
    if user.is_blocked:
        logger.info(f"Blocked user {user.email} rejected")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: blocked users cannot perform this action",
        )
    return user
