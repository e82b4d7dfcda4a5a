from typing import Sequence

from .errors import DivisionByZeroError, LengthMismatchError
from .models import Answer, Entry, EntryEvaluation, EvaluationResult


def is_match(given: str, expected: str) -> bool:
    # Exact after trimming: no case folding, no Unicode normalization.
    return given.strip() == expected.strip()


def percent(correct: int, total: int) -> int:
    """``correct / total`` as a whole percent, rounding halves up."""
    if total == 0:
        raise DivisionByZeroError()
    return (correct * 200 + total) // (total * 2)


def evaluate(
    presentation_order: Sequence[Entry], answers: Sequence[Answer]
) -> EvaluationResult:
    """Scores answers position by position against the entries they answered."""
    if len(presentation_order) != len(answers):
        raise LengthMismatchError(len(presentation_order), len(answers))

    evaluations = []
    for entry, answer in zip(presentation_order, answers):
        reading_correct = is_match(answer.user_reading, entry.reading)
        meaning_correct = is_match(answer.user_meaning, entry.meaning)
        evaluations.append(
            EntryEvaluation(
                entry=entry,
                answer=answer,
                reading_correct=reading_correct,
                meaning_correct=meaning_correct,
                total_correct=reading_correct and meaning_correct,
            )
        )

    correct_count = sum(1 for e in evaluations if e.total_correct)
    total = len(presentation_order)
    return EvaluationResult(
        evaluations=evaluations,
        correct_count=correct_count,
        total_entries=total,
        score=percent(correct_count, total),
    )
