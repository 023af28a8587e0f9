# app/api/v1/endpoints/donation_request.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from core.constants import STAFF_ROLES
from core.database import get_db
from core.dependencies import get_principal_email
from core.permissions import load_user, require_not_blocked, require_roles
from models.donation_request import DonationStatus
from models.user import User
from schemas.donation_request import (
    DonationRequestCreate, DonationRequestUpdate, DonationConfirm,
    DonationRequestRead, DonationRequestDeleted
)
from services.donation_request_service import DonationRequestService

router = APIRouter()


# --------------------------
# public feed
# --------------------------

@router.get("/pending", response_model=List[DonationRequestRead])
async def list_pending_requests(
        limit: int = Query(0, ge=0, le=100),
        db: AsyncSession = Depends(get_db)
):
    """Pending requests, newest first"""
    service = DonationRequestService(db)
    return await service.list_pending(limit)


# --------------------------
# lifecycle
# --------------------------

@router.post("", response_model=DonationRequestRead, status_code=status.HTTP_201_CREATED)
async def create_request(
        request_data: DonationRequestCreate,
        current_user: User = Depends(require_not_blocked),
        db: AsyncSession = Depends(get_db)
):
    service = DonationRequestService(db)
    return await service.create_request(request_data, current_user)


@router.get("/my-requests", response_model=List[DonationRequestRead])
async def list_my_requests(
        status_filter: Optional[DonationStatus] = Query(None, alias="status"),
        limit: int = Query(0, ge=0),
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    """The caller's requests, newest first; limit 0 returns all"""
    service = DonationRequestService(db)
    return await service.list_my_requests(principal_email, status_filter, limit)


@router.get("", response_model=List[DonationRequestRead])
async def list_requests(
        status_filter: Optional[DonationStatus] = Query(None, alias="status"),
        limit: int = Query(0, ge=0, le=100),
        page: int = Query(1, ge=1),
        current_user: User = Depends(require_roles(*STAFF_ROLES)),
        db: AsyncSession = Depends(get_db)
):
    """All requests (admin / volunteer)"""
    service = DonationRequestService(db)
    return await service.list_requests(status_filter, limit, page)


@router.get("/{request_id}", response_model=DonationRequestRead)
async def get_request(
        request_id: UUID,
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    service = DonationRequestService(db)
    return await service.get_request(str(request_id))


@router.patch("/confirm/{request_id}", response_model=DonationRequestRead)
async def confirm_request(
        request_id: UUID,
        confirm_data: Optional[DonationConfirm] = None,
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    """Attach the caller as donor to a pending request"""
    service = DonationRequestService(db)
    caller = await load_user(db, principal_email)
    return await service.confirm_request(
        str(request_id), confirm_data or DonationConfirm(), principal_email, caller
    )


@router.patch("/{request_id}", response_model=DonationRequestRead)
async def update_request(
        request_id: UUID,
        update_data: DonationRequestUpdate,
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    service = DonationRequestService(db)
    return await service.update_request(str(request_id), update_data, principal_email)


@router.delete("/{request_id}", response_model=DonationRequestDeleted)
async def delete_request(
        request_id: UUID,
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    service = DonationRequestService(db)
    await service.delete_request(str(request_id), principal_email)
    return {"uuid": str(request_id)}
