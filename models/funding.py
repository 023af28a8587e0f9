# app/models/funding.py
from sqlalchemy import Column, Integer, String, DateTime, Float
import uuid
from models.base import Base, utcnow


class Funding(Base):
    """Append-only record of a confirmed payment."""
    __tablename__ = "fundings"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)
    payment_intent_id = Column(String(255), nullable=True, unique=True)

    payer_name = Column(String(200), nullable=True)
    payer_email = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
