from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from campus_chat.infrastructure.db.base import Base


class _EntityRefMixin:
    """``post_id`` xor ``project_id`` plus the acting user."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    @declared_attr
    def post_id(cls) -> Mapped[uuid.UUID | None]:
        return mapped_column(
            UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=True,
        )

    @declared_attr
    def project_id(cls) -> Mapped[uuid.UUID | None]:
        return mapped_column(
            UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True,
        )


class LikeModel(_EntityRefMixin, Base):
    __tablename__ = "likes"

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
        UniqueConstraint("project_id", "user_id", name="uq_likes_project_user"),
    )


class BookmarkModel(_EntityRefMixin, Base):
    __tablename__ = "bookmarks"

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_bookmarks_post_user"),
        UniqueConstraint("project_id", "user_id", name="uq_bookmarks_project_user"),
    )


class CommentModel(_EntityRefMixin, Base):
    __tablename__ = "comments"

    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_comments_post", "post_id"),
        Index("ix_comments_project", "project_id"),
    )
