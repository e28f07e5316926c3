"""
Blog API — Blog SQLAlchemy Model
==================================

What:  ORM model representing the `blogs` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by BlogService for CRUD operations.

Column notes:
    - id: integer identity, generated by the database
    - image: either an absolute URL or a relative public storage path
      (storage/blogs/<file>); TEXT because client-supplied URLs have no
      practical length bound
    - created_at / updated_at: timezone-aware UTC, filled in by the ORM on
      insert; updated_at is refreshed on every UPDATE

    Index on created_at DESC backs the list endpoint's ordering.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Blog(Base):
    """
    A blog article with a cover image.

    Lifecycle:
        1. Created by POST /blogs (image stored or URL kept as-is)
        2. Mutated in place by PUT/PATCH /blogs/{id}; a replaced local image
           file is deleted from the storage disk
        3. Deleted by DELETE /blogs/{id}, together with its local image file
    """

    __tablename__ = "blogs"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Blog title (max 255 characters)",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Blog body text",
    )

    # Format: https://... or storage/blogs/blog_<ts>_<token>.<ext>
    image: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Absolute image URL or relative public storage path",
    )

    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author display name (max 255 characters)",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this blog was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this blog was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_blogs_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
