from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from models.blog import BlogStatus


class BlogCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    thumbnail: Optional[str] = Field(None, max_length=500)
    content: str = Field(..., min_length=1)


class BlogUpdate(BaseModel):
    """Content edit; publishing goes through BlogStatusUpdate."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    thumbnail: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = Field(None, min_length=1)

    class Config:
        extra = "forbid"


class BlogStatusUpdate(BaseModel):
    status: BlogStatus


class BlogRead(BaseModel):
    uuid: str
    title: str
    thumbnail: Optional[str] = None
    content: str
    status: BlogStatus
    author_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
