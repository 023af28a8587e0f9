# app/api/v1/endpoints/user.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
from pydantic import EmailStr
from uuid import UUID

from core.database import get_db
from core.dependencies import get_principal_email
from core.permissions import get_current_user, require_roles
from models.user import User, UserStatus
from schemas.user import (
    UserCreate, UserRead, UserProfileUpdate, UserStatusUpdate, UserRoleUpdate,
    AddUserResult, UserRoleInfo, DonorCard, DonorSearchFilter, BloodGroup
)
from services.user import UserService

router = APIRouter(tags=["Users"])


@router.post("/add-user", response_model=AddUserResult)
async def add_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create the user on first sign-in, otherwise count the login"""
    service = UserService(db)
    user, created = await service.add_user(user_data)
    return {
        "message": "User created." if created else "User already exists and was updated.",
        "created": created,
        "user": user,
    }


@router.get("/get-user-role", response_model=UserRoleInfo)
async def get_user_role(current_user: User = Depends(get_current_user)):
    return {"role": current_user.role, "status": current_user.status}


@router.get("/search-donors", response_model=List[DonorCard])
async def search_donors(
    blood_group: Optional[BloodGroup] = Query(None),
    district: Optional[str] = Query(None),
    upazila: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Public donor search"""
    filters = DonorSearchFilter(blood_group=blood_group, district=district, upazila=upazila)
    service = UserService(db)
    return await service.search_donors(filters)


@router.get("/users/{email}", response_model=UserRead)
async def get_user(
    email: EmailStr,
    principal_email: str = Depends(get_principal_email),
    db: AsyncSession = Depends(get_db)
):
    """Own profile, or any profile for an admin"""
    service = UserService(db)
    return await service.get_user_by_email(email, principal_email)


@router.patch("/users/{email}", response_model=UserRead)
async def update_user(
    email: EmailStr,
    update_data: UserProfileUpdate,
    principal_email: str = Depends(get_principal_email),
    db: AsyncSession = Depends(get_db)
):
    service = UserService(db)
    return await service.update_profile(email, update_data, principal_email)


@router.get("/get-users", response_model=List[UserRead])
async def list_users(
    status: Optional[UserStatus] = Query(None),
    current_user: User = Depends(require_roles("admin")),
    db: AsyncSession = Depends(get_db)
):
    """All users except the caller (admin only)"""
    service = UserService(db)
    return await service.list_users(current_user, status)


@router.patch("/update-users/status/{user_id}", response_model=UserRead)
async def update_user_status(
    user_id: UUID,
    status_data: UserStatusUpdate,
    current_user: User = Depends(require_roles("admin")),
    db: AsyncSession = Depends(get_db)
):
    service = UserService(db)
    return await service.update_user_status(str(user_id), status_data.status, current_user)


@router.patch("/update-users/role/{user_id}", response_model=UserRead)
async def update_user_role(
    user_id: UUID,
    role_data: UserRoleUpdate,
    current_user: User = Depends(require_roles("admin")),
    db: AsyncSession = Depends(get_db)
):
    service = UserService(db)
    return await service.update_user_role(str(user_id), role_data.role, current_user)
