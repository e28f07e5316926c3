"""
Blog API — Blog Service (Business Logic Orchestrator)
=======================================================

What:  CRUD operations for Blog records, including their image files.
How:   Composes ImageService (decode/store/delete images) with async
       SQLAlchemy queries on the request's session.
Who:   Called by the /blogs route handlers.

Orchestration Flow (POST /blogs):
    ┌──────────┐    ┌──────────────┐    ┌──────────┐    ┌──────────────┐
    │ Validate │───▶│ Store image  │───▶│ Insert   │───▶│ Rewrite URL  │
    │ (Route)  │    │ (ImageServ)  │    │ (DB)     │    │ (response)   │
    └──────────┘    └──────────────┘    └──────────┘    └──────────────┘

    On insert or update failure the freshly written file is removed before
    the error propagates.

The service is stateless: the session and the asset base URL are
passed into every call. The persisted `image` column is never rewritten;
only the BlogResponse carries the absolute URL.
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import DatabaseError, NotFoundError
from blog_api.models.blog import Blog
from blog_api.schemas.blog import BlogPayload, BlogResponse
from blog_api.services.image_service import image_service

logger = logging.getLogger(__name__)


class BlogService:
    """
    Business logic layer for blog operations.

    Error Handling Strategy:
        Application exceptions (NotFoundError, ImageUploadError subclasses)
        propagate unchanged. Anything else raised by a query is wrapped in
        DatabaseError so internals never reach the client.
    """

    def to_response(self, blog: Blog, base_url: str) -> BlogResponse:
        """Serialize a Blog with its image rewritten to an absolute URL."""
        return BlogResponse(
            id=blog.id,
            title=blog.title,
            description=blog.description,
            image=image_service.public_url(blog.image, base_url),
            author=blog.author,
            created_at=blog.created_at,
            updated_at=blog.updated_at,
        )

    async def find_blog(self, db: AsyncSession, blog_id: int) -> Blog:
        """
        Load a blog by primary key.

        Raises:
            NotFoundError: No blog with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Blog).where(Blog.id == blog_id))
            blog = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching blog %s: %s", blog_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the blog. Please try again.",
                context={"blog_id": blog_id, "error_type": type(e).__name__},
            )

        if blog is None:
            raise NotFoundError(resource="Blog", resource_id=str(blog_id))
        return blog

    async def list_blogs(self, db: AsyncSession, base_url: str) -> List[BlogResponse]:
        """
        All blogs, newest first.

        Query plan:
            SELECT * FROM blogs ORDER BY created_at DESC, id DESC
            → idx_blogs_created_at; id breaks ties between rows created
              within the same clock tick
        """
        try:
            result = await db.execute(
                select(Blog).order_by(desc(Blog.created_at), desc(Blog.id))
            )
            blogs = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing blogs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve blogs. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [self.to_response(blog, base_url) for blog in blogs]

    async def create_blog(
        self,
        db: AsyncSession,
        payload: BlogPayload,
        base_url: str,
    ) -> BlogResponse:
        """
        Store the image, then insert the record.

        Raises:
            ImageUploadError (and subclasses): image rejected or not written (→ 500)
            DatabaseError: insert failed (→ 500)
        """
        image_path = await image_service.store_image(payload.image)

        blog = Blog(
            title=payload.title,
            description=payload.description,
            image=image_path,
            author=payload.author,
        )
        try:
            db.add(blog)
            await db.flush()
            await db.refresh(blog)
        except Exception as e:
            # Don't leave an orphaned file behind a failed write
            if image_path != payload.image:
                await image_service.delete_image(image_path)
            logger.error("Database error creating blog: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the blog. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Blog created: %s (image=%s)", blog.id, blog.image)
        return self.to_response(blog, base_url)

    async def update_blog(
        self,
        db: AsyncSession,
        blog: Blog,
        payload: BlogPayload,
        base_url: str,
    ) -> BlogResponse:
        """
        Replace every field of an existing blog.

        The submitted image goes through ImageService.store_image with the
        current value as the old image, so a replaced local file is deleted.

        Raises:
            ImageUploadError (and subclasses): image rejected (→ 500)
            DatabaseError: update failed (→ 500)
        """
        blog_id = blog.id
        old_image = blog.image
        image_path = await image_service.store_image(payload.image, old_image)

        blog.title = payload.title
        blog.description = payload.description
        blog.image = image_path
        blog.author = payload.author
        try:
            await db.flush()
            await db.refresh(blog)
        except Exception as e:
            if image_path != payload.image:
                await image_service.delete_image(image_path)
            logger.error("Database error updating blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the blog. Please try again.",
                context={"blog_id": blog_id, "error_type": type(e).__name__},
            )

        logger.info("Blog updated: %s (image %s → %s)", blog.id, old_image, image_path)
        return self.to_response(blog, base_url)

    async def delete_blog(self, db: AsyncSession, blog: Blog) -> None:
        """
        Delete the blog's local image file (best-effort), then the record.

        URL images are left alone; a missing file is not an error.

        Raises:
            DatabaseError: delete failed (→ 500)
        """
        blog_id = blog.id
        await image_service.delete_image(blog.image)

        try:
            await db.delete(blog)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the blog. Please try again.",
                context={"blog_id": blog_id, "error_type": type(e).__name__},
            )

        logger.info("Blog deleted: %s", blog_id)


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
