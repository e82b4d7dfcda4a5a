import logging
import random
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import EmptySelectionError, IncompleteAnswerError, InvalidStateError
from .models import Answer, Entry
from .randomizer import shuffle

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TestSession:
    """
    One pass over a fixed, shuffled ordering of entries.

    Answers line up with ``presentation_order`` by position, so the order is
    computed once in ``start`` and never touched again.
    """

    __test__ = False  # not a pytest class

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng
        self._state = SessionState.NOT_STARTED
        self._order: Tuple[Entry, ...] = ()
        self._answers: List[Answer] = []
        self._position = 0

    @classmethod
    def begin(
        cls, entries: Sequence[Entry], rng: Optional[random.Random] = None
    ) -> "TestSession":
        session = cls(rng)
        session.start(entries)
        return session

    # --- Read-only views ---
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def presentation_order(self) -> Tuple[Entry, ...]:
        return self._order

    @property
    def answers(self) -> Tuple[Answer, ...]:
        return tuple(self._answers)

    @property
    def current_position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._order)

    @property
    def current_entry(self) -> Optional[Entry]:
        if self._state is not SessionState.IN_PROGRESS:
            return None
        return self._order[self._position]

    @property
    def is_last(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and self._position == self.total - 1

    @property
    def progress(self) -> int:
        """Percent of entries answered so far."""
        if not self._order:
            return 0
        return self._position * 100 // self.total

    # --- Transitions ---
    def start(self, entries: Sequence[Entry]) -> Entry:
        if self._state is not SessionState.NOT_STARTED:
            raise InvalidStateError(f"Cannot start a session that is {self._state.value}.")
        if not entries:
            raise EmptySelectionError()
        self._order = shuffle(entries, self._rng)
        self._answers = []
        self._position = 0
        self._state = SessionState.IN_PROGRESS
        logger.info(f"Test started with {self.total} words")
        return self._order[0]

    def submit_answer(self, user_reading: str, user_meaning: str) -> Optional[Entry]:
        """
        Records an answer for the active entry.

        Returns the next active entry, or ``None`` once the session completes.
        """
        self._require_in_progress("submit an answer")
        reading = (user_reading or "").strip()
        meaning = (user_meaning or "").strip()
        if not reading or not meaning:
            raise IncompleteAnswerError()

        active = self._order[self._position]
        self._answers.append(
            Answer(entry_id=active.id, user_reading=reading, user_meaning=meaning)
        )
        if self._position == self.total - 1:
            self._position += 1
            self._state = SessionState.COMPLETED
            logger.info(f"Test completed ({self.total} answers)")
            return None
        self._position += 1
        return self._order[self._position]

    def cancel(self) -> None:
        self._require_in_progress("cancel")
        answered = len(self._answers)
        self._order = ()
        self._answers = []
        self._position = 0
        self._state = SessionState.CANCELLED
        logger.info(f"Test cancelled after {answered} answers")

    def outcome(self) -> Tuple[Tuple[Entry, ...], Tuple[Answer, ...]]:
        """The ``(presentation_order, answers)`` pair handed to scoring."""
        if self._state is not SessionState.COMPLETED:
            raise InvalidStateError(f"No outcome for a session that is {self._state.value}.")
        return self._order, tuple(self._answers)

    def _require_in_progress(self, action: str) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise InvalidStateError(
                f"Cannot {action} when the session is {self._state.value}."
            )
