"""Backup files: a JSON array of lists, pretty-printed on export."""

import json
from datetime import date
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from .errors import ImportFormatError, NothingToExportError
from .models import VocabList


def _is_list_record(item) -> bool:
    return (
        isinstance(item, dict)
        and bool(item.get("id"))
        and bool(item.get("title"))
        and isinstance(item.get("words"), list)
    )


def parse_import(raw: Union[bytes, str]) -> List[VocabList]:
    """
    Validates and parses a backup file.

    Only the top-level shape is checked: each element needs an ``id``, a
    ``title`` and a ``words`` array. Entries only have to fit the ``Entry``
    model; a missing ``description`` or ``createdAt`` gets its default.
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise ImportFormatError("Could not read the file.") from e

    if not isinstance(data, list):
        raise ImportFormatError("A list collection file must be an array.")
    if not all(_is_list_record(item) for item in data):
        raise ImportFormatError("The file is not a valid list collection.")

    try:
        return [VocabList.model_validate(item) for item in data]
    except ValidationError as e:
        raise ImportFormatError(f"The file is not a valid list collection: {e}") from e


def export_lists(lists: Sequence[VocabList]) -> str:
    if not lists:
        raise NothingToExportError()
    return json.dumps(
        [vocab.model_dump(by_alias=True) for vocab in lists],
        indent=2,
        ensure_ascii=False,
    )


def backup_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"kotoba-backup-{today.isoformat()}.json"
