from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.application.exceptions import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


class BaseRepo:
    """Shares the session and translates driver errors into application errors."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, stmt: Any) -> Any:
        try:
            return await self._session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Row already exists") from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Store query failed")
            raise StoreUnavailableError("Store unavailable") from exc

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ConflictError("Row already exists") from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Store flush failed")
            raise StoreUnavailableError("Store unavailable") from exc
