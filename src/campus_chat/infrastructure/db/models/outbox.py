from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from campus_chat.application.row_changes import ROW_CHANGED
from campus_chat.infrastructure.db.base import Base


class OutboxStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"
    DEAD = "dead"


class OutboxMessageModel(Base):
    """Row changes written with each chat mutation and relayed to the change feed.

    ``payload`` is the ``{table, type, record, old_record}`` document the
    realtime router dispatches on. Rows move pending → processing → sent; a
    publish failure parks them as failed with ``last_error`` until
    ``next_retry_at``, and they end as dead once the attempt budget is spent.
    """

    __tablename__ = "outbox_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default=ROW_CHANGED,
        server_default=text(f"'{ROW_CHANGED}'"),
    )
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OutboxStatus.PENDING,
        server_default=text(f"'{OutboxStatus.PENDING}'"),
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_retry_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=text("now()"),
    )

    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in OutboxStatus) + ")",
            name="ck_outbox_status",
        ),
        # Only rows the relay can still pick up.
        Index(
            "ix_outbox_due",
            "next_retry_at",
            "created_at",
            postgresql_where=text(f"status IN ('{OutboxStatus.PENDING}', '{OutboxStatus.FAILED}')"),
        ),
    )
