"""Create blogs table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `blogs` table and its created_at index.

Rollback: downgrade() drops the table (all blog rows are lost; image files
on the storage disk are not touched).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "blogs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            comment="Blog title (max 255 characters)",
        ),
        sa.Column(
            "description",
            sa.Text(),
            nullable=False,
            comment="Blog body text",
        ),
        # URL or storage/blogs/<file>
        sa.Column(
            "image",
            sa.Text(),
            nullable=False,
            comment="Absolute image URL or relative public storage path",
        ),
        sa.Column(
            "author",
            sa.String(255),
            nullable=False,
            comment="Author display name (max 255 characters)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this blog was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this blog was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Backs GET /blogs (ORDER BY created_at DESC)
    op.create_index(
        "idx_blogs_created_at",
        "blogs",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_blogs_created_at", table_name="blogs")
    op.drop_table("blogs")
