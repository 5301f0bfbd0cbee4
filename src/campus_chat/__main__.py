"""Entrypoint: python -m campus_chat"""
from __future__ import annotations

import uvicorn

from campus_chat.config import settings


def main() -> None:
    uvicorn.run(
        "campus_chat.app:create_app",
        factory=True,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
