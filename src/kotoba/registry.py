import logging
import random
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .confirmation import Confirm, always_yes, require_confirmation
from .errors import InvalidStateError, SessionNotFoundError, ValidationFailedError
from .models import AnswerOutcome, Entry, EvaluationResult, Prompt
from .retry import incorrect_subset, retry_all
from .scoring import evaluate
from .session import SessionState, TestSession

logger = logging.getLogger(__name__)

RETRY_MODES = {"all": retry_all, "incorrect": incorrect_subset}


class SessionRecord(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    list_id: str
    session: TestSession
    result: Optional[EvaluationResult] = None
    created_at: datetime = Field(default_factory=datetime.now)


class SessionRegistry:
    """Holds the one test (or finished result) belonging to each browser."""

    def __init__(
        self,
        timeout_minutes: int,
        rng_factory: Optional[Callable[[], random.Random]] = None,
    ):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.rng_factory = rng_factory or random.Random
        self.records: Dict[str, SessionRecord] = {}

    def start(
        self,
        list_id: str,
        entries: Sequence[Entry],
        replaces: Optional[str] = None,
    ) -> Tuple[str, SessionRecord]:
        # Fails before touching the registry when there is nothing to test.
        session = TestSession.begin(entries, self.rng_factory())
        if replaces:
            self.discard(replaces)
        new_id = str(uuid.uuid4())
        record = SessionRecord(list_id=list_id, session=session)
        self.records[new_id] = record
        logger.info(f"New session: {new_id} [List: {list_id}, Words: {session.total}]")
        return new_id, record

    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        if not session_id or session_id not in self.records:
            return None
        record = self.records[session_id]
        if datetime.now() - record.created_at > self.timeout:
            del self.records[session_id]
            logger.info(f"Session expired: {session_id}")
            return None
        return record

    def require(self, session_id: Optional[str]) -> SessionRecord:
        record = self.get(session_id)
        if record is None:
            raise SessionNotFoundError()
        return record

    def discard(self, session_id: Optional[str]) -> None:
        if session_id:
            self.records.pop(session_id, None)

    def prompt(self, session_id: Optional[str]) -> Prompt:
        record = self.require(session_id)
        return _prompt_for(record)

    def submit(self, session_id: Optional[str], reading: str, meaning: str) -> AnswerOutcome:
        record = self.require(session_id)
        session = record.session
        session.submit_answer(reading, meaning)
        if session.state is SessionState.COMPLETED:
            record.result = evaluate(*session.outcome())
            logger.info(
                f"Session finished: {session_id} "
                f"[{record.result.correct_count}/{record.result.total_entries}, "
                f"score {record.result.score}]"
            )
            return AnswerOutcome(completed=True, result=record.result)
        return AnswerOutcome(completed=False, next=_prompt_for(record))

    def cancel(self, session_id: Optional[str], confirm: Confirm = always_yes) -> None:
        record = self.require(session_id)
        require_confirmation(confirm, "Stop the current test and go back?")
        record.session.cancel()
        self.discard(session_id)

    def result(self, session_id: Optional[str]) -> EvaluationResult:
        record = self.require(session_id)
        if record.result is None:
            raise InvalidStateError("The test has not finished yet.")
        return record.result

    def retry(self, session_id: Optional[str], mode: str) -> Tuple[str, SessionRecord]:
        if mode not in RETRY_MODES:
            raise ValidationFailedError(f"Unknown retry mode {mode!r}.")
        record = self.require(session_id)
        result = self.result(session_id)
        entries = RETRY_MODES[mode](result)
        return self.start(record.list_id, entries, replaces=session_id)


def _prompt_for(record: SessionRecord) -> Prompt:
    session = record.session
    entry = session.current_entry
    if entry is None:
        raise InvalidStateError(f"No active word; the test is {session.state.value}.")
    return Prompt(
        list_id=record.list_id,
        term=entry.term,
        position=session.current_position,
        total=session.total,
        progress=session.progress,
        is_last=session.is_last,
    )
