import io
import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

import pandas as pd
from pydantic import ValidationError

from .confirmation import Confirm, always_yes, require_confirmation
from .database import get_db_connection
from .errors import (
    EntryNotFoundError,
    ImportFormatError,
    ListNotFoundError,
    StoreError,
    ValidationFailedError,
)
from .models import Entry, ListSummary, VocabList

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["term", "reading", "meaning"]


# --- Blob storage ---
class BlobStore(ABC):
    """Key-value storage of text blobs."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryBlobStore(BlobStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SQLiteBlobStore(BlobStore):
    """Blobs in the ``blobs`` table created by ``database.init_db``."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        try:
            conn = get_db_connection(self.db_path)
            try:
                row = conn.execute(
                    "SELECT value FROM blobs WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {key!r}: {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            conn = get_db_connection(self.db_path)
            with conn:
                conn.execute(
                    "INSERT INTO blobs (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                    "updated_at = CURRENT_TIMESTAMP",
                    (key, value),
                )
            conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            conn = get_db_connection(self.db_path)
            with conn:
                conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
            conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {key!r}: {e}") from e


# --- Vocabulary ---
def _required(value: str, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationFailedError(f"{field} is required.")
    return cleaned


class VocabularyStore:
    """
    Manages word lists persisted as one JSON array under a single key.

    Every operation reads the whole collection and, when it changes
    anything, writes the whole collection back.
    """

    def __init__(self, blobs: BlobStore, key: str):
        self.blobs = blobs
        self.key = key

    # --- Collection I/O ---
    def all_lists(self) -> List[VocabList]:
        raw = self.blobs.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            return [VocabList.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            raise StoreError(f"Stored lists are unreadable: {e}") from e

    def _save(self, lists: Sequence[VocabList]) -> None:
        payload = json.dumps(
            [vocab.model_dump(by_alias=True) for vocab in lists], ensure_ascii=False
        )
        self.blobs.set(self.key, payload)

    def _index_of(self, lists: List[VocabList], list_id: str) -> int:
        for i, vocab in enumerate(lists):
            if vocab.id == list_id:
                return i
        raise ListNotFoundError(list_id)

    def get_list(self, list_id: str) -> VocabList:
        lists = self.all_lists()
        return lists[self._index_of(lists, list_id)]

    def summaries(self) -> List[ListSummary]:
        return [
            ListSummary(
                id=vocab.id,
                title=vocab.title,
                description=vocab.description,
                word_count=len(vocab.words),
                created_at=vocab.created_at,
            )
            for vocab in self.all_lists()
        ]

    # --- Lists ---
    def create_list(self, title: str, description: str = "") -> VocabList:
        vocab = VocabList(
            id=str(uuid.uuid4()),
            title=_required(title, "Title"),
            description=(description or "").strip(),
        )
        self._save([vocab] + self.all_lists())
        logger.info(f"Created list {vocab.id} ({vocab.title})")
        return vocab

    def update_metadata(self, list_id: str, title: str, description: str = "") -> VocabList:
        lists = self.all_lists()
        i = self._index_of(lists, list_id)
        lists[i] = lists[i].model_copy(
            update={
                "title": _required(title, "Title"),
                "description": (description or "").strip(),
            }
        )
        self._save(lists)
        return lists[i]

    def update_words(self, list_id: str, words: Sequence[Entry]) -> VocabList:
        lists = self.all_lists()
        i = self._index_of(lists, list_id)
        lists[i] = lists[i].model_copy(update={"words": list(words)})
        self._save(lists)
        return lists[i]

    def delete_list(self, list_id: str, confirm: Confirm = always_yes) -> None:
        lists = self.all_lists()
        i = self._index_of(lists, list_id)
        require_confirmation(confirm, f"Delete the list {lists[i].title!r}?")
        del lists[i]
        self._save(lists)
        logger.info(f"Deleted list {list_id}")

    def import_lists(self, imported: Sequence[VocabList]) -> int:
        self._save(list(imported) + self.all_lists())
        logger.info(f"Imported {len(imported)} lists")
        return len(imported)

    # --- Entries ---
    def add_entry(self, list_id: str, term: str, reading: str, meaning: str) -> Entry:
        entry = Entry(
            id=str(uuid.uuid4()),
            term=_required(term, "Term"),
            reading=_required(reading, "Reading"),
            meaning=_required(meaning, "Meaning"),
        )
        vocab = self.get_list(list_id)
        self.update_words(list_id, vocab.words + [entry])
        return entry

    def update_entry(
        self, list_id: str, entry_id: str, term: str, reading: str, meaning: str
    ) -> Entry:
        updated = Entry(
            id=entry_id,
            term=_required(term, "Term"),
            reading=_required(reading, "Reading"),
            meaning=_required(meaning, "Meaning"),
        )
        vocab = self.get_list(list_id)
        if not any(w.id == entry_id for w in vocab.words):
            raise EntryNotFoundError(list_id, entry_id)
        self.update_words(
            list_id, [updated if w.id == entry_id else w for w in vocab.words]
        )
        return updated

    def delete_entry(
        self, list_id: str, entry_id: str, confirm: Confirm = always_yes
    ) -> None:
        vocab = self.get_list(list_id)
        if not any(w.id == entry_id for w in vocab.words):
            raise EntryNotFoundError(list_id, entry_id)
        require_confirmation(confirm, "Delete this word?")
        self.update_words(list_id, [w for w in vocab.words if w.id != entry_id])

    def search_entries(self, list_id: str, query: str = "") -> List[Entry]:
        vocab = self.get_list(list_id)
        needle = (query or "").lower()
        return [
            w
            for w in vocab.words
            if needle in w.term.lower()
            or needle in w.reading.lower()
            or needle in w.meaning.lower()
        ]

    def select_entries(self, list_id: str, entry_ids: Optional[Sequence[str]] = None) -> List[Entry]:
        """The list's entries, or only those named in ``entry_ids`` (list order)."""
        vocab = self.get_list(list_id)
        if not entry_ids:
            return list(vocab.words)
        wanted = set(entry_ids)
        missing = wanted - {w.id for w in vocab.words}
        if missing:
            raise EntryNotFoundError(list_id, sorted(missing)[0])
        return [w for w in vocab.words if w.id in wanted]

    # --- CSV ---
    def import_entries_csv(self, list_id: str, content: bytes) -> List[Entry]:
        vocab = self.get_list(list_id)
        try:
            df = pd.read_csv(
                io.BytesIO(content),
                encoding="utf-8-sig",
                dtype=str,
                keep_default_na=False,
            )
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise ImportFormatError(f"Could not read CSV: {e}") from e

        df.columns = [str(c).strip().lower() for c in df.columns]
        if "term" not in df.columns and "kanji" in df.columns:
            df = df.rename(columns={"kanji": "term"})
        missing = [c for c in CSV_COLUMNS if c not in df.columns]
        if missing:
            raise ImportFormatError(f"CSV is missing columns: {', '.join(missing)}")

        added = []
        skipped = 0
        for row in df[CSV_COLUMNS].to_dict("records"):
            values = {k: str(v).strip() for k, v in row.items()}
            if not all(values.values()):
                skipped += 1
                continue
            added.append(Entry(id=str(uuid.uuid4()), **values))

        self.update_words(list_id, vocab.words + added)
        logger.info(f"Loaded {len(added)} words into {list_id} ({skipped} rows skipped)")
        return added

    def export_entries_csv(self, list_id: str) -> str:
        vocab = self.get_list(list_id)
        df = pd.DataFrame(
            [w.model_dump(include=set(CSV_COLUMNS)) for w in vocab.words],
            columns=CSV_COLUMNS,
        )
        return df.to_csv(index=False)
