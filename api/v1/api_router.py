# app/api/v1/router.py
from fastapi import APIRouter
from api.v1.endpoints import (
    # Users
    user,

    # Donation requests
    donation_request,

    # Blog
    blog,

    # Funding & Payments
    funding,

    # Dashboard
    dashboard,
)

api_router = APIRouter()

# ========== 1️⃣ Users ==========
api_router.include_router(user.router)

# ========== 2️⃣ Donation requests ==========
api_router.include_router(donation_request.router, prefix="/donation-requests", tags=["Donation Requests"])

# ========== 3️⃣ Blog ==========
api_router.include_router(blog.router, prefix="/blogs", tags=["Blog"])

# ========== 4️⃣ Funding & Payments ==========
api_router.include_router(funding.router)

# ========== 5️⃣ Dashboard ==========
api_router.include_router(dashboard.router)
