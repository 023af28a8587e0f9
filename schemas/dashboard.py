from pydantic import BaseModel
from typing import Dict, List
from datetime import datetime


class AdminStats(BaseModel):
    total_donors: int
    total_requests: int
    total_funding: float


class MonthlyCount(BaseModel):
    month: str  # YYYY-MM
    count: int


class RecentRequest(BaseModel):
    uuid: str
    recipient_name: str
    blood_group: str
    status: str
    requester_email: str
    created_at: datetime


class DashboardStats(AdminStats):
    users_by_role: Dict[str, int]
    users_by_status: Dict[str, int]
    requests_by_status: Dict[str, int]
    donors_by_blood_group: Dict[str, int]
    monthly_requests: List[MonthlyCount]
    recent_requests: List[RecentRequest]
