# app/api/v1/endpoints/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import ADMIN_ONLY, STAFF_ROLES
from core.database import get_db
from core.permissions import require_roles
from models.user import User
from schemas.dashboard import AdminStats, DashboardStats
from services.dashboard_service import DashboardService

router = APIRouter(tags=["Dashboard"])


@router.get("/admin-stats", response_model=AdminStats)
async def get_admin_stats(
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    """Headline counts (admin / volunteer)"""
    service = DashboardService(db)
    return await service.get_admin_stats()


@router.get("/dashboard-stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(require_roles(*ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db)
):
    """Full breakdown (admin only)"""
    service = DashboardService(db)
    return await service.get_dashboard_stats()
