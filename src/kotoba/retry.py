from typing import Tuple

from .models import Entry, EvaluationResult


def incorrect_subset(result: EvaluationResult) -> Tuple[Entry, ...]:
    """Entries missed in the finished test, in the order they were shown."""
    return tuple(e.entry for e in result.evaluations if not e.total_correct)


def retry_all(result: EvaluationResult) -> Tuple[Entry, ...]:
    return tuple(e.entry for e in result.evaluations)
