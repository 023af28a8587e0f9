from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from models.user import UserRole, UserStatus


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


# ---------- sign-in upsert ----------
class UserCreate(BaseModel):
    """Payload of /add-user. Role and status are never taken from it."""
    email: EmailStr
    name: Optional[str] = Field(None, max_length=200)
    photo_url: Optional[str] = Field(None, max_length=500)
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = Field(None, max_length=100)
    upazila: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "donor@example.com",
                "name": "Rahim Uddin",
                "photo_url": "https://example.com/rahim.png",
                "blood_group": "O+",
                "district": "Dhaka",
                "upazila": "Savar",
            }
        }


# ---------- profile update (self) ----------
class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    photo_url: Optional[str] = Field(None, max_length=500)
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = Field(None, max_length=100)
    upazila: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)

    class Config:
        extra = "forbid"


# ---------- admin updates ----------
class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserRoleUpdate(BaseModel):
    role: UserRole


# ---------- output ----------
class UserRead(BaseModel):
    uuid: str
    email: EmailStr
    name: Optional[str] = None
    photo_url: Optional[str] = None
    blood_group: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
    phone: Optional[str] = None
    role: str
    status: str
    login_count: int
    last_login_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AddUserResult(BaseModel):
    message: str
    created: bool
    user: UserRead


class UserRoleInfo(BaseModel):
    role: str
    status: str


class DonorCard(BaseModel):
    """Public projection returned by donor search."""
    name: Optional[str] = None
    email: EmailStr
    photo_url: Optional[str] = None
    blood_group: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None

    class Config:
        from_attributes = True


class DonorSearchFilter(BaseModel):
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
