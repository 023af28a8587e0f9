# app/services/dashboard_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from core.constants import BLOOD_GROUPS
from models.donation_request import DonationRequest, DonationStatus
from models.funding import Funding
from models.user import User, UserRole, UserStatus


def _month_key(dt: datetime) -> str:
    return f"{dt.year:04d}-{dt.month:02d}"


def _last_months(now: datetime, count: int = 12) -> List[str]:
    """Month keys oldest first, ending with the month of `now`."""
    keys = []
    year, month = now.year, now.month
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(keys))


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- admin / volunteer summary ----------
    async def get_admin_stats(self) -> Dict[str, Any]:
        total_donors = await self.db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.DONOR.value)
        )
        total_requests = await self.db.scalar(select(func.count(DonationRequest.id)))
        total_funding = await self.db.scalar(select(func.coalesce(func.sum(Funding.amount), 0)))

        return {
            "total_donors": total_donors or 0,
            "total_requests": total_requests or 0,
            "total_funding": float(total_funding or 0),
        }

    # ---------- admin dashboard ----------
    async def get_dashboard_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        summary = await self.get_admin_stats()

        users_by_role = {role.value: 0 for role in UserRole}
        users_by_role.update(await self._count_by(User.role))

        users_by_status = {s.value: 0 for s in UserStatus}
        users_by_status.update(await self._count_by(User.status))

        requests_by_status = {s.value: 0 for s in DonationStatus}
        requests_by_status.update(await self._count_by(DonationRequest.status))

        donors_by_blood_group = {group: 0 for group in BLOOD_GROUPS}
        result = await self.db.execute(
            select(User.blood_group, func.count(User.id))
            .where(User.role == UserRole.DONOR.value, User.blood_group.is_not(None))
            .group_by(User.blood_group)
        )
        for group, count in result.all():
            donors_by_blood_group[group] = count

        months = _last_months(now)
        monthly = defaultdict(int)
        first_year, first_month = (int(part) for part in months[0].split("-"))
        window_start = datetime(first_year, first_month, 1, tzinfo=timezone.utc)
        result = await self.db.execute(
            select(DonationRequest.created_at).where(DonationRequest.created_at >= window_start)
        )
        for (created_at,) in result.all():
            monthly[_month_key(created_at)] += 1

        recent = await self.db.execute(
            select(DonationRequest)
            .order_by(DonationRequest.created_at.desc(), DonationRequest.id.asc())
            .limit(5)
        )

        return {
            **summary,
            "users_by_role": users_by_role,
            "users_by_status": users_by_status,
            "requests_by_status": requests_by_status,
            "donors_by_blood_group": donors_by_blood_group,
            "monthly_requests": [{"month": key, "count": monthly.get(key, 0)} for key in months],
            "recent_requests": [
                {
                    "uuid": r.uuid,
                    "recipient_name": r.recipient_name,
                    "blood_group": r.blood_group,
                    "status": r.status,
                    "requester_email": r.requester_email,
                    "created_at": r.created_at,
                }
                for r in recent.scalars().all()
            ],
        }

    async def _count_by(self, column) -> Dict[str, int]:
        result = await self.db.execute(select(column, func.count()).group_by(column))
        return {key: count for key, count in result.all() if key is not None}
