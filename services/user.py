# app/services/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException
from typing import Optional, List, Tuple
import logging

from core.constants import ADMIN_ONLY
from core.permissions import load_user, require_owner_or_role
from models.base import utcnow
from models.user import User, UserRole, UserStatus
from schemas.user import UserCreate, UserProfileUpdate, DonorSearchFilter

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- sign-in upsert ----------
    async def add_user(self, user_data: UserCreate) -> Tuple[User, bool]:
        """Insert on first contact, otherwise refresh name/photo and count the login."""

        existing = await load_user(self.db, user_data.email)
        if existing:
            return await self._record_login(existing, user_data), False

        user = User(
            email=user_data.email,
            name=user_data.name,
            photo_url=user_data.photo_url,
            blood_group=user_data.blood_group.value if user_data.blood_group else None,
            district=user_data.district,
            upazila=user_data.upazila,
            phone=user_data.phone,
            role=UserRole.DONOR.value,
            status=UserStatus.ACTIVE.value,
            login_count=1,
            last_login_at=utcnow(),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent first login for the same email
            await self.db.rollback()
            existing = await load_user(self.db, user_data.email)
            if existing is None:
                raise
            return await self._record_login(existing, user_data), False

        await self.db.refresh(user)
        logger.info(f"User {user.email} created")
        return user, True

    async def _record_login(self, user: User, user_data: UserCreate) -> User:
        values = {
            "login_count": User.login_count + 1,
            "last_login_at": utcnow(),
        }
        if user_data.name:
            values["name"] = user_data.name
        if user_data.photo_url:
            values["photo_url"] = user_data.photo_url

        await self.db.execute(
            update(User)
            .where(User.id == user.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        await self.db.refresh(user)
        return user

    # ---------- profile ----------
    async def get_user_by_email(self, email: str, principal_email: str) -> User:
        """Own profile, or any profile for an admin."""

        await require_owner_or_role(
            self.db, principal_email, email, ADMIN_ONLY,
            detail="Forbidden: You can only access your own profile."
        )

        user = await load_user(self.db, email)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def update_profile(
            self,
            email: str,
            update_data: UserProfileUpdate,
            principal_email: str
    ) -> User:
        if principal_email != email:
            raise HTTPException(status_code=403, detail="Forbidden: You can only update your own profile.")

        user = await load_user(self.db, email)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        update_dict = update_data.dict(exclude_unset=True)
        if "blood_group" in update_dict and update_dict["blood_group"] is not None:
            update_dict["blood_group"] = update_dict["blood_group"].value

        for key, value in update_dict.items():
            setattr(user, key, value)

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        return user

    # ---------- admin ----------
    async def list_users(self, admin_user: User, status: Optional[UserStatus] = None) -> List[User]:
        """Every user except the calling admin, newest first."""

        query = select(User).where(User.email != admin_user.email)
        if status:
            query = query.where(User.status == status.value)
        query = query.order_by(User.created_at.desc(), User.id.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _get_by_uuid(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.uuid == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def update_user_status(self, user_id: str, status: UserStatus, admin_user: User) -> User:
        user = await self._get_by_uuid(user_id)

        old_status = user.status
        user.status = status.value
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user.email} status changed from {old_status} to {status.value} by {admin_user.email}")
        return user

    async def update_user_role(self, user_id: str, role: UserRole, admin_user: User) -> User:
        user = await self._get_by_uuid(user_id)

        old_role = user.role
        user.role = role.value
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user.email} role changed from {old_role} to {role.value} by {admin_user.email}")
        return user

    # ---------- public donor search ----------
    async def search_donors(self, filters: DonorSearchFilter) -> List[User]:
        query = select(User).where(
            User.role == UserRole.DONOR.value,
            User.status == UserStatus.ACTIVE.value,
        )

        if filters.blood_group:
            query = query.where(User.blood_group == filters.blood_group.value)
        if filters.district:
            query = query.where(User.district == filters.district)
        if filters.upazila:
            query = query.where(User.upazila == filters.upazila)

        query = query.order_by(User.name.asc(), User.id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())
