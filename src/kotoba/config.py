import os
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


class Settings:
    PROJECT_NAME: str = "kotoba"
    DEBUG: bool = os.environ.get("KOTOBA_DEBUG", "") == "1"
    LOG_DIR: str = os.environ.get("KOTOBA_LOG_DIR", "log")
    LOG_FILE: str = "kotoba.log"
    DB_DIR: str = os.environ.get("KOTOBA_DB_DIR", "db")
    DB_FILE: str = "kotoba.db"
    STORE_KEY: str = "kotoba-lists"
    SESSION_COOKIE_NAME: str = "kotoba_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    SHUFFLE_SEED: Optional[int] = _optional_int("KOTOBA_SHUFFLE_SEED")
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
