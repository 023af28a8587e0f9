# app/services/blog_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException
from typing import List, Optional
import logging

from models.blog import Blog, BlogStatus
from models.user import User
from schemas.blog import BlogCreate, BlogUpdate

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_blog(self, blog_data: BlogCreate, author: User) -> Blog:
        """New posts always start as drafts."""
        blog = Blog(
            title=blog_data.title,
            thumbnail=blog_data.thumbnail,
            content=blog_data.content,
            status=BlogStatus.DRAFT.value,
            author_email=author.email,
        )
        self.db.add(blog)
        await self.db.commit()
        await self.db.refresh(blog)

        logger.info(f"Blog {blog.uuid} created by {author.email}")
        return blog

    async def get_blog(self, blog_id: str) -> Blog:
        result = await self.db.execute(select(Blog).where(Blog.uuid == blog_id))
        blog = result.scalar_one_or_none()
        if not blog:
            raise HTTPException(status_code=404, detail="Blog not found")
        return blog

    async def get_published_blog(self, blog_id: str) -> Blog:
        blog = await self.get_blog(blog_id)
        if blog.status != BlogStatus.PUBLISHED:
            raise HTTPException(status_code=404, detail="Blog not found")
        return blog

    async def list_blogs(self, status: Optional[BlogStatus] = None, limit: int = 0) -> List[Blog]:
        query = select(Blog)
        if status:
            query = query.where(Blog.status == status.value)
        query = query.order_by(Blog.created_at.desc(), Blog.id.asc())
        if limit and limit > 0:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_blog(self, blog_id: str, update_data: BlogUpdate) -> Blog:
        blog = await self.get_blog(blog_id)

        for key, value in update_data.dict(exclude_unset=True).items():
            if value is not None:
                setattr(blog, key, value)

        self.db.add(blog)
        await self.db.commit()
        await self.db.refresh(blog)
        return blog

    async def update_blog_status(self, blog_id: str, status: BlogStatus, admin_user: User) -> Blog:
        blog = await self.get_blog(blog_id)

        blog.status = status.value
        self.db.add(blog)
        await self.db.commit()
        await self.db.refresh(blog)

        logger.info(f"Blog {blog_id} set to {status.value} by {admin_user.email}")
        return blog

    async def delete_blog(self, blog_id: str, admin_user: User) -> None:
        blog = await self.get_blog(blog_id)

        await self.db.delete(blog)
        await self.db.commit()

        logger.info(f"Blog {blog_id} deleted by {admin_user.email}")
