# app/services/donation_request_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from fastapi import HTTPException, status
from typing import List, Optional
import enum
import logging

from core.constants import ADMIN_ONLY, STAFF_ROLES
from core.permissions import require_owner_or_role
from models.base import utcnow
from models.donation_request import DonationRequest, DonationStatus, TERMINAL_STATUSES
from models.user import User
from schemas.donation_request import (
    DonationRequestCreate, DonationRequestUpdate, DonationConfirm
)

logger = logging.getLogger(__name__)


# Explicit status edits. Confirmation is the other way into `inprogress`.
ALLOWED_TRANSITIONS = {
    DonationStatus.PENDING: {DonationStatus.INPROGRESS, DonationStatus.DONE, DonationStatus.CANCELED},
    DonationStatus.INPROGRESS: {DonationStatus.PENDING, DonationStatus.DONE, DonationStatus.CANCELED},
    DonationStatus.DONE: set(),
    DonationStatus.CANCELED: set(),
}


DONOR_FIELDS = {"donor_name", "donor_email"}

SELF_CONFIRM_MESSAGE = "Forbidden: you cannot confirm your own donation request"


def _same_email(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a and b) and a.lower() == b.lower()


def _newest_first(query):
    # ties keep insertion order
    return query.order_by(DonationRequest.created_at.desc(), DonationRequest.id.asc())


class DonationRequestService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- create ----------
    async def create_request(self, request_data: DonationRequestCreate, requester: User) -> DonationRequest:
        """Create a pending request owned by `requester` (already checked not blocked)."""
        donation_request = DonationRequest(
            requester_name=requester.display_name,
            requester_email=requester.email,
            recipient_name=request_data.recipient_name,
            recipient_district=request_data.recipient_district,
            recipient_upazila=request_data.recipient_upazila,
            hospital_name=request_data.hospital_name,
            full_address=request_data.full_address,
            blood_group=request_data.blood_group.value,
            donation_date=request_data.donation_date,
            donation_time=request_data.donation_time,
            request_message=request_data.request_message,
            status=DonationStatus.PENDING.value,
        )

        self.db.add(donation_request)
        await self.db.commit()
        await self.db.refresh(donation_request)

        logger.info(f"Donation request {donation_request.uuid} created by {requester.email}")
        return donation_request

    # ---------- read ----------
    async def get_request(self, request_id: str) -> DonationRequest:
        result = await self.db.execute(
            select(DonationRequest).where(DonationRequest.uuid == request_id)
        )
        donation_request = result.scalar_one_or_none()
        if not donation_request:
            raise HTTPException(status_code=404, detail="Donation request not found")
        return donation_request

    async def list_my_requests(
            self,
            requester_email: str,
            status_filter: Optional[DonationStatus] = None,
            limit: int = 0
    ) -> List[DonationRequest]:
        """The caller's own requests, newest first. limit 0 means no limit."""
        query = select(DonationRequest).where(DonationRequest.requester_email == requester_email)
        if status_filter:
            query = query.where(DonationRequest.status == status_filter.value)

        query = _newest_first(query)
        if limit and limit > 0:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_requests(
            self,
            status_filter: Optional[DonationStatus] = None,
            limit: int = 0,
            page: int = 1
    ) -> List[DonationRequest]:
        query = select(DonationRequest)
        if status_filter:
            query = query.where(DonationRequest.status == status_filter.value)

        query = _newest_first(query)
        if limit and limit > 0:
            query = query.offset((page - 1) * limit).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_pending(self, limit: int = 0) -> List[DonationRequest]:
        return await self.list_requests(DonationStatus.PENDING, limit=limit)

    # ---------- confirm ----------
    async def confirm_request(
            self,
            request_id: str,
            confirm_data: DonationConfirm,
            caller_email: str,
            caller: Optional[User] = None
    ) -> DonationRequest:
        """pending -> inprogress with the donor attached."""
        donation_request = await self.get_request(request_id)

        if donation_request.status != DonationStatus.PENDING:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot confirm a donation request with status '{donation_request.status}'; "
                       f"only pending requests can be confirmed"
            )

        donor_email = confirm_data.donor_email or caller_email
        if _same_email(donation_request.requester_email, caller_email) \
                or _same_email(donation_request.requester_email, donor_email):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SELF_CONFIRM_MESSAGE)

        donor_name = confirm_data.donor_name or (caller.display_name if caller else donor_email.split('@')[0])

        # the pending precondition is part of the write so two confirmations cannot both win
        result = await self.db.execute(
            update(DonationRequest)
            .where(
                DonationRequest.id == donation_request.id,
                DonationRequest.status == DonationStatus.PENDING.value
            )
            .values(
                status=DonationStatus.INPROGRESS.value,
                donor_name=donor_name,
                donor_email=donor_email,
                updated_at=utcnow()
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            current_status = await self._current_status(donation_request.id)
            raise HTTPException(
                status_code=400,
                detail=f"Cannot confirm a donation request with status '{current_status}'; "
                       f"only pending requests can be confirmed"
            )

        await self.db.commit()
        await self.db.refresh(donation_request)

        logger.info(f"Donation request {request_id} confirmed by {caller_email} (donor {donor_email})")
        return donation_request

    # ---------- update ----------
    async def update_request(
            self,
            request_id: str,
            update_data: DonationRequestUpdate,
            caller_email: str
    ) -> DonationRequest:
        """Status-only updates: owner or admin/volunteer. Anything else: owner or admin."""
        donation_request = await self.get_request(request_id)

        if update_data.is_status_only():
            await require_owner_or_role(
                self.db, caller_email, donation_request.requester_email, STAFF_ROLES,
                detail="Forbidden: Not authorized to update the status of this request"
            )
        else:
            await require_owner_or_role(
                self.db, caller_email, donation_request.requester_email, ADMIN_ONLY,
                detail="Forbidden: Not authorized to update this request"
            )

        changes = update_data.dict(exclude_unset=True)
        if not changes:
            return donation_request

        current = DonationStatus(donation_request.status)
        target = DonationStatus(changes.get("status", current))
        touches_donor = bool(DONOR_FIELDS & changes.keys())

        conditions = [DonationRequest.id == donation_request.id]
        if "status" in changes:
            self._check_transition(current, target)
        if touches_donor or ("status" in changes and target == DonationStatus.INPROGRESS):
            self._check_donor(donation_request, target, changes)
        if "status" in changes or touches_donor:
            if current == DonationStatus.INPROGRESS and target == DonationStatus.PENDING:
                changes["donor_name"] = None
                changes["donor_email"] = None
            conditions.append(DonationRequest.status == current.value)

        values = {
            key: value.value if isinstance(value, enum.Enum) else value
            for key, value in changes.items()
        }
        values["updated_at"] = utcnow()

        result = await self.db.execute(
            update(DonationRequest)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            current_status = await self._current_status(donation_request.id)
            raise HTTPException(
                status_code=400,
                detail=f"Donation request status changed to '{current_status}' while updating; retry the update"
            )

        await self.db.commit()
        await self.db.refresh(donation_request)

        logger.info(f"Donation request {request_id} updated by {caller_email}: {sorted(changes)}")
        return donation_request

    # ---------- delete ----------
    async def delete_request(self, request_id: str, caller_email: str) -> None:
        donation_request = await self.get_request(request_id)

        await require_owner_or_role(
            self.db, caller_email, donation_request.requester_email, ADMIN_ONLY,
            detail="Forbidden: Not authorized to delete this request"
        )

        await self.db.delete(donation_request)
        await self.db.commit()

        logger.info(f"Donation request {request_id} deleted by {caller_email}")

    # ---------- helpers ----------
    @staticmethod
    def _check_transition(current: DonationStatus, target: DonationStatus) -> None:
        if current == target and current not in TERMINAL_STATUSES:
            return

        if target not in ALLOWED_TRANSITIONS[current]:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change status from '{current.value}' to '{target.value}'"
            )

    @staticmethod
    def _check_donor(donation_request: DonationRequest, target: DonationStatus, changes: dict) -> None:
        """Donor details exist only on an in-progress request and never name the requester."""
        if target != DonationStatus.INPROGRESS:
            if any(changes.get(field) is not None for field in DONOR_FIELDS):
                raise HTTPException(
                    status_code=400,
                    detail="Donor details can only be set on a request that is in progress"
                )
            return

        donor_name = changes.get("donor_name", donation_request.donor_name)
        donor_email = changes.get("donor_email", donation_request.donor_email)
        if not donor_name or not donor_email:
            raise HTTPException(
                status_code=400,
                detail="Donor name and email are required to mark a request in progress"
            )
        if _same_email(donor_email, donation_request.requester_email):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SELF_CONFIRM_MESSAGE)

    async def _current_status(self, pk: int) -> str:
        current_status = await self.db.scalar(
            select(DonationRequest.status).where(DonationRequest.id == pk)
        )
        if current_status is None:
            raise HTTPException(status_code=404, detail="Donation request not found")
        return current_status
