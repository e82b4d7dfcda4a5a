import pytest

from kotoba.errors import DivisionByZeroError, LengthMismatchError
from kotoba.models import Answer, Entry
from kotoba.scoring import evaluate, is_match, percent


def ans(entry, reading, meaning):
    return Answer(entry_id=entry.id, user_reading=reading, user_meaning=meaning)


def test_single_correct_entry_scores_100():
    entry = Entry(id="a", term="食べる", reading="たべる", meaning="먹다")
    result = evaluate([entry], [ans(entry, "たべる", "먹다")])
    assert result.score == 100
    assert result.correct_count == 1
    assert result.all_correct
    assert result.incorrect == []


def test_wrong_meaning_only(entries):
    first, second = entries[:2]
    result = evaluate(
        [first, second],
        [ans(first, "たべる", "먹다"), ans(second, "のむ", "먹다")],
    )
    assert result.correct_count == 1
    assert result.score == 50
    missed = result.evaluations[1]
    assert missed.reading_correct is True
    assert missed.meaning_correct is False
    assert missed.total_correct is False


def test_whitespace_padding_ignored():
    entry = Entry(id="a", term="食べる", reading=" たべる", meaning="먹다 ")
    result = evaluate([entry], [ans(entry, " たべる ", "먹다")])
    assert result.evaluations[0].total_correct


def test_case_sensitive():
    assert is_match(" taberu", "taberu ")
    assert not is_match("Taberu", "taberu")


def test_no_unicode_normalization():
    # Half-width katakana is a different answer.
    assert not is_match("ﾀﾍﾞﾙ", "タベル")


def test_length_mismatch(entries):
    with pytest.raises(LengthMismatchError):
        evaluate(entries[:2], [ans(entries[0], "たべる", "먹다")])


def test_empty_is_division_by_zero():
    with pytest.raises(DivisionByZeroError):
        evaluate([], [])
    with pytest.raises(ZeroDivisionError):
        percent(0, 0)


@pytest.mark.parametrize(
    "correct,total,expected",
    [(0, 4, 0), (1, 8, 13), (2, 3, 67), (1, 3, 33), (1, 200, 1), (1, 400, 0), (5, 5, 100)],
)
def test_percent_rounds_half_up(correct, total, expected):
    assert percent(correct, total) == expected


def test_evaluate_is_deterministic(entries):
    answers = [ans(e, e.reading, "x") for e in entries]
    assert evaluate(entries, answers) == evaluate(entries, answers)


def test_evaluations_keep_presentation_order(entries):
    order = list(reversed(entries))
    result = evaluate(order, [ans(e, e.reading, e.meaning) for e in order])
    assert [e.entry.id for e in result.evaluations] == ["w4", "w3", "w2", "w1"]
