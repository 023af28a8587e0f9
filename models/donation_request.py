# app/models/donation_request.py
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Time, Enum
import uuid
import enum
from models.base import Base, utcnow


class DonationStatus(str, enum.Enum):
    PENDING = "pending"  # waiting for a donor
    INPROGRESS = "inprogress"  # donor attached
    DONE = "done"
    CANCELED = "canceled"


TERMINAL_STATUSES = {DonationStatus.DONE, DonationStatus.CANCELED}


class DonationRequest(Base):
    __tablename__ = "donation_requests"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    # owner
    requester_name = Column(String(200), nullable=True)
    requester_email = Column(String(255), nullable=False, index=True)

    # recipient
    recipient_name = Column(String(200), nullable=False)
    recipient_district = Column(String(100), nullable=False)
    recipient_upazila = Column(String(100), nullable=False)
    hospital_name = Column(String(255), nullable=True)
    full_address = Column(Text, nullable=True)
    blood_group = Column(String(3), nullable=False, index=True)
    donation_date = Column(Date, nullable=False)
    donation_time = Column(Time, nullable=False)
    request_message = Column(Text, nullable=True)

    status = Column(
        Enum("pending", "inprogress", "done", "canceled", name="donation_request_status"),
        default=DonationStatus.PENDING.value,
        nullable=False,
        index=True
    )

    # set on confirmation
    donor_name = Column(String(200), nullable=True)
    donor_email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
