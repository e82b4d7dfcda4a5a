import random

from .config import settings
from .registry import SessionRegistry
from .store import SQLiteBlobStore, VocabularyStore


def _rng() -> random.Random:
    return random.Random(settings.SHUFFLE_SEED)


vocab_store = VocabularyStore(SQLiteBlobStore(), settings.STORE_KEY)
session_registry = SessionRegistry(settings.SESSION_TIMEOUT_MINUTES, _rng)
