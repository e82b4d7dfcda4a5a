import time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    return int(time.time() * 1000)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Vocabulary ---
class Entry(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    term: str
    reading: str
    meaning: str

    @model_validator(mode="before")
    @classmethod
    def accept_kanji(cls, data: Any) -> Any:
        # Older backups store the prompt under "kanji".
        if isinstance(data, dict) and "term" not in data and "kanji" in data:
            data = {**data, "term": data["kanji"]}
        return data


class VocabList(CamelModel):
    id: str
    title: str
    description: str = ""
    words: List[Entry] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)


class ListSummary(CamelModel):
    id: str
    title: str
    description: str
    word_count: int
    created_at: int


# --- Test session ---
class Answer(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    entry_id: str
    user_reading: str
    user_meaning: str


class EntryEvaluation(CamelModel):
    entry: Entry
    answer: Answer
    reading_correct: bool
    meaning_correct: bool
    total_correct: bool


class EvaluationResult(CamelModel):
    evaluations: List[EntryEvaluation]
    correct_count: int
    total_entries: int
    score: int

    @property
    def incorrect(self) -> List[EntryEvaluation]:
        return [e for e in self.evaluations if not e.total_correct]

    @property
    def all_correct(self) -> bool:
        return self.correct_count == self.total_entries


class Prompt(CamelModel):
    """What the test screen shows for the active entry."""

    list_id: str
    term: str
    position: int
    total: int
    progress: int
    is_last: bool


class AnswerOutcome(CamelModel):
    completed: bool
    next: Optional[Prompt] = None
    result: Optional[EvaluationResult] = None
