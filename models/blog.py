# app/models/blog.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
import uuid
import enum
from models.base import Base, utcnow


class BlogStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False)
    thumbnail = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    status = Column(
        Enum("draft", "published", name="blog_status"),
        default=BlogStatus.DRAFT.value,
        nullable=False,
        index=True
    )
    author_email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
