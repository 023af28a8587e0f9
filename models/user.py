# app/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, Enum
import uuid
import enum
from models.base import Base, utcnow


class UserRole(str, enum.Enum):
    DONOR = "donor"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"  # may read, may not create donation requests


class User(Base):
    __tablename__ = "users"

    # ---------- identifiers ----------
    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)

    # ---------- profile ----------
    name = Column(String(200), nullable=True)
    photo_url = Column(String(500), nullable=True)
    blood_group = Column(String(3), nullable=True, index=True)
    district = Column(String(100), nullable=True, index=True)
    upazila = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)

    # ---------- role and status ----------
    role = Column(
        Enum("donor", "volunteer", "admin", name="user_role"),
        default=UserRole.DONOR.value,
        nullable=False
    )
    status = Column(
        Enum("active", "blocked", name="user_status"),
        default=UserStatus.ACTIVE.value,
        nullable=False
    )

    # ---------- login tracking ----------
    login_count = Column(Integer, default=0, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def display_name(self) -> str:
        return self.name or self.email.split('@')[0]

    @property
    def is_blocked(self) -> bool:
        return self.status == UserStatus.BLOCKED
