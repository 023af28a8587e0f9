# app/schemas/donation_request.py
from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import date, datetime, time

from models.donation_request import DonationStatus
from schemas.user import BloodGroup


# ---------- create ----------
class DonationRequestCreate(BaseModel):
    """New blood request. The requester is always the caller."""
    recipient_name: str = Field(..., min_length=1, max_length=200)
    recipient_district: str = Field(..., min_length=1, max_length=100)
    recipient_upazila: str = Field(..., min_length=1, max_length=100)
    hospital_name: Optional[str] = Field(None, max_length=255)
    full_address: Optional[str] = None
    blood_group: BloodGroup
    donation_date: date
    donation_time: time
    request_message: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "recipient_name": "Karim",
                "recipient_district": "Dhaka",
                "recipient_upazila": "Dhanmondi",
                "hospital_name": "Dhaka Medical College Hospital",
                "full_address": "Zahir Raihan Rd, Dhaka 1000",
                "blood_group": "B+",
                "donation_date": "2026-11-02",
                "donation_time": "10:30",
                "request_message": "Two bags needed before surgery",
            }
        }


# ---------- partial update ----------
class DonationRequestUpdate(BaseModel):
    """Fields an owner or admin may change. A payload holding only `status`
    is a status update, which volunteers may also perform."""
    recipient_name: Optional[str] = Field(None, min_length=1, max_length=200)
    recipient_district: Optional[str] = Field(None, min_length=1, max_length=100)
    recipient_upazila: Optional[str] = Field(None, min_length=1, max_length=100)
    hospital_name: Optional[str] = Field(None, max_length=255)
    full_address: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    donation_date: Optional[date] = None
    donation_time: Optional[time] = None
    request_message: Optional[str] = None
    donor_name: Optional[str] = Field(None, max_length=200)
    donor_email: Optional[EmailStr] = None
    status: Optional[DonationStatus] = None

    class Config:
        extra = "forbid"

    @validator(
        "recipient_name", "recipient_district", "recipient_upazila",
        "blood_group", "donation_date", "donation_time", "status"
    )
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    def is_status_only(self) -> bool:
        return set(self.dict(exclude_unset=True)) == {"status"}


# ---------- confirm ----------
class DonationConfirm(BaseModel):
    """Donor details; both default to the caller's stored profile."""
    donor_name: Optional[str] = Field(None, max_length=200)
    donor_email: Optional[EmailStr] = None


# ---------- output ----------
class DonationRequestRead(BaseModel):
    uuid: str
    requester_name: Optional[str] = None
    requester_email: EmailStr
    recipient_name: str
    recipient_district: str
    recipient_upazila: str
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    blood_group: str
    donation_date: date
    donation_time: time
    request_message: Optional[str] = None
    status: DonationStatus
    donor_name: Optional[str] = None
    donor_email: Optional[EmailStr] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DonationRequestDeleted(BaseModel):
    uuid: str
    deleted: bool = True
    message: str = "Donation request deleted"
