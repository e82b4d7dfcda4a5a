import logging
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from kotoba.models import Entry  # noqa: E402
from kotoba.store import MemoryBlobStore, VocabularyStore  # noqa: E402


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def entries():
    return [
        Entry(id="w1", term="食べる", reading="たべる", meaning="먹다"),
        Entry(id="w2", term="飲む", reading="のむ", meaning="마시다"),
        Entry(id="w3", term="見る", reading="みる", meaning="보다"),
        Entry(id="w4", term="行く", reading="いく", meaning="가다"),
    ]


@pytest.fixture
def store():
    return VocabularyStore(MemoryBlobStore(), "kotoba-lists")


@pytest.fixture
def client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from kotoba import router
    from kotoba.app import create_app
    from kotoba.config import settings
    from kotoba.registry import SessionRegistry
    from kotoba.store import SQLiteBlobStore

    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))

    app = create_app()
    test_store = VocabularyStore(SQLiteBlobStore(), settings.STORE_KEY)
    test_registry = SessionRegistry(30, lambda: random.Random(7))
    app.dependency_overrides[router.get_store] = lambda: test_store
    app.dependency_overrides[router.get_registry] = lambda: test_registry

    yield TestClient(app)

    kotoba_logger = logging.getLogger("kotoba")
    for handler in list(kotoba_logger.handlers):
        kotoba_logger.removeHandler(handler)
        handler.close()
