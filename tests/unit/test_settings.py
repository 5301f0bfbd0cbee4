from __future__ import annotations

import os

from campus_chat.config import settings


def test_test_environment_is_loaded_before_settings():
    assert os.environ["JWT_SECRET"] == settings.JWT_SECRET != ""
    assert settings.database_url.endswith(f"/{os.environ['POSTGRES_DB']}")
    assert settings.DB_APPLICATION_NAME == "campus-chat"
