"""
Blog API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and generates the OpenAPI document from them.
Who:   Used by route handlers and BlogService.
"""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BlogPayload(BaseModel):
    """
    Body of POST /blogs, PUT /blogs/{id} and PATCH /blogs/{id}.

    Every field is required for both create and update. Surrounding
    whitespace is stripped before the length rules are applied, so a blank
    string counts as missing.

    `image` is either an absolute URL (kept as-is) or a base64 data URI
    (`data:image/png;base64,...`) that is decoded and stored.
    """
    title: str = Field(min_length=1, max_length=255, description="Blog title")
    description: str = Field(min_length=1, description="Blog body text")
    image: str = Field(
        min_length=1,
        description="Absolute image URL or data:image/<type>;base64,<payload> URI",
    )
    author: str = Field(min_length=1, max_length=255, description="Author name")

    model_config = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BlogResponse(BaseModel):
    """
    Serialized Blog record.

    `image` is always absolute here: relative storage paths are rewritten
    to asset URLs by BlogService before the model is built.
    """
    id: int = Field(description="Blog identifier")
    title: str
    description: str
    image: str = Field(description="Absolute URL of the blog image")
    author: str
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC)")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. {"message": "Blog deleted successfully"}."""
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ValidationErrorResponse(BaseModel):
    """
    422 body: field name → list of messages.

    Example:
        {"errors": {"title": ["The title field is required."]}}
    """
    errors: Dict[str, List[str]]


class ErrorResponse(BaseModel):
    """
    500 body.

    Example:
        {"error": "Image upload failed: Invalid image type. Allowed: jpg, jpeg, png, gif, webp"}
    """
    error: str


class NotFoundResponse(BaseModel):
    """404 body."""
    message: str


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
