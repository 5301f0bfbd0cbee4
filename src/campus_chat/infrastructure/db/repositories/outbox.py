from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update

from campus_chat.application.repositories.outbox import OutboxRecord
from campus_chat.infrastructure.db.models.outbox import OutboxMessageModel, OutboxStatus
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class OutboxWriterRepo(BaseRepo):
    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._session.add(OutboxMessageModel(event_type=event_type, payload=payload))
        await self._flush()

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        due = OutboxMessageModel.next_retry_at.is_(None) | (
            OutboxMessageModel.next_retry_at <= datetime.now(timezone.utc)
        )
        stmt = (
            select(OutboxMessageModel)
            .where(OutboxMessageModel.status.in_([OutboxStatus.PENDING, OutboxStatus.FAILED]), due)
            .order_by(OutboxMessageModel.created_at.asc(), OutboxMessageModel.id.asc())
            .limit(batch_size)
            .with_for_update(skip_locked=True)
        )
        result = await self._execute(stmt)
        rows = result.scalars().all()

        if rows:
            await self._set_status([r.id for r in rows], OutboxStatus.PROCESSING)
            await self._flush()

        return [
            OutboxRecord(id=r.id, event_type=r.event_type, payload=r.payload, attempts=r.attempts)
            for r in rows
        ]

    async def mark_sent(self, ids: list[int]) -> None:
        if ids:
            await self._set_status(ids, OutboxStatus.SENT)

    async def mark_failed(
        self, record_id: int, next_retry_at: datetime, *, error: str | None = None,
    ) -> None:
        stmt = (
            update(OutboxMessageModel)
            .where(OutboxMessageModel.id == record_id)
            .values(
                status=OutboxStatus.FAILED,
                attempts=OutboxMessageModel.attempts + 1,
                next_retry_at=next_retry_at,
                last_error=error,
            )
        )
        await self._execute(stmt)

    async def mark_dead(self, record_id: int) -> None:
        await self._set_status([record_id], OutboxStatus.DEAD)

    async def _set_status(self, ids: list[int], status: OutboxStatus) -> None:
        await self._execute(
            update(OutboxMessageModel).where(OutboxMessageModel.id.in_(ids)).values(status=status)
        )
