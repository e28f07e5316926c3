"""
Blog API — Blog Route Handlers
================================

What:  JSON CRUD endpoints for the Blog resource.
How:   {blog_id} resolved to a Blog by the get_blog_or_404 dependency,
       body validation via BlogPayload, then delegation to BlogService.
       Errors are raised as application exceptions and formatted by the
       global handlers in main.py.

Route Inventory:
    GET         /blogs        list, newest first
    GET         /blogs/{id}   single blog
    POST        /blogs        create (201)
    PUT|PATCH   /blogs/{id}   full update
    DELETE      /blogs/{id}   delete record and local image
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import get_db_session
from blog_api.exceptions import NotFoundError
from blog_api.models.blog import Blog
from blog_api.schemas.blog import (
    BlogPayload,
    BlogResponse,
    ErrorResponse,
    MessageResponse,
    NotFoundResponse,
    ValidationErrorResponse,
)
from blog_api.services.blog_service import blog_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/blogs", tags=["Blogs"])

_NOT_FOUND = {404: {"description": "Blog not found", "model": NotFoundResponse}}
_WRITE_ERRORS = {
    422: {"description": "Invalid request body", "model": ValidationErrorResponse},
    500: {"description": "Image upload or database failure", "model": ErrorResponse},
}


def _base_url(request: Request) -> str:
    """Scheme + host + root path of the incoming request."""
    return str(request.base_url)


# Largest value the INTEGER primary key can hold
_MAX_BLOG_ID = 2**31 - 1


async def get_blog_or_404(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Blog:
    """
    Resolve the {blog_id} path segment to a Blog.

    Solved before the request body is validated, so an unknown id answers
    404 whatever the body holds. Segments that are not a positive integer
    can never match a record and get the same 404.
    """
    if not (blog_id.isascii() and blog_id.isdigit()) or not 0 < int(blog_id) <= _MAX_BLOG_ID:
        raise NotFoundError(resource="Blog", resource_id=blog_id)
    return await blog_service.find_blog(db, int(blog_id))


@router.get(
    "",
    response_model=List[BlogResponse],
    summary="List blogs",
    description="Returns every blog ordered by creation time, newest first.",
)
async def list_blogs(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> List[BlogResponse]:
    return await blog_service.list_blogs(db=db, base_url=_base_url(request))


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={**_NOT_FOUND},
    summary="Get a single blog by ID",
)
async def get_blog(
    request: Request,
    blog: Blog = Depends(get_blog_or_404),
) -> BlogResponse:
    return blog_service.to_response(blog, _base_url(request))


@router.post(
    "",
    status_code=201,
    response_model=BlogResponse,
    responses={**_WRITE_ERRORS},
    summary="Create a blog",
    description=(
        "Creates a blog. `image` is either an absolute URL (stored as-is) or a "
        "base64 data URI (jpg, jpeg, png, gif or webp, max 5MB) which is saved "
        "to public storage."
    ),
)
async def create_blog(
    payload: BlogPayload,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    """
    Create a blog.

    Error responses (handled by global exception handlers):
        HTTP 422: Missing/invalid fields
        HTTP 500: Image rejected or not written, database failure
    """
    logger.info("Create blog request: title=%r author=%r", payload.title, payload.author)
    return await blog_service.create_blog(db=db, payload=payload, base_url=_base_url(request))


@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={**_NOT_FOUND, **_WRITE_ERRORS},
    summary="Update a blog",
)
@router.patch(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={**_NOT_FOUND, **_WRITE_ERRORS},
    summary="Update a blog",
)
async def update_blog(
    payload: BlogPayload,
    request: Request,
    blog: Blog = Depends(get_blog_or_404),
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    """
    Replace every field of a blog.

    PUT and PATCH share this handler and the same required-field rules.
    A new data-URI image replaces the stored file; the old local file is
    deleted.
    """
    logger.info("Update blog request: id=%s", blog.id)
    return await blog_service.update_blog(
        db=db,
        blog=blog,
        payload=payload,
        base_url=_base_url(request),
    )


@router.delete(
    "/{blog_id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND},
    summary="Delete a blog",
)
async def delete_blog(
    blog: Blog = Depends(get_blog_or_404),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await blog_service.delete_blog(db=db, blog=blog)
    return MessageResponse(message="Blog deleted successfully")
