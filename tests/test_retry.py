from kotoba.models import Answer
from kotoba.retry import incorrect_subset, retry_all
from kotoba.scoring import evaluate
from kotoba.session import SessionState, TestSession


def run_session(entries, rng, wrong_ids):
    session = TestSession.begin(entries, rng)
    while session.state is SessionState.IN_PROGRESS:
        entry = session.current_entry
        meaning = "wrong" if entry.id in wrong_ids else entry.meaning
        session.submit_answer(entry.reading, meaning)
    return session, evaluate(*session.outcome())


def test_all_correct_gives_empty_subset(entries, rng):
    _, result = run_session(entries, rng, set())
    assert incorrect_subset(result) == ()


def test_subset_in_presentation_order(entries, rng):
    session, result = run_session(entries, rng, {"w1", "w3"})
    expected = tuple(e for e in session.presentation_order if e.id in {"w1", "w3"})
    assert incorrect_subset(result) == expected


def test_subset_holds_canonical_entries(entries):
    first, second = entries[:2]
    result = evaluate(
        [first, second],
        [
            Answer(entry_id=first.id, user_reading="たべる", user_meaning="먹다"),
            Answer(entry_id=second.id, user_reading="のむ", user_meaning="먹다"),
        ],
    )
    assert incorrect_subset(result) == (second,)


def test_retry_incorrect_starts_independent_session(entries, rng):
    _, result = run_session(entries, rng, {"w2"})
    retry = TestSession.begin(incorrect_subset(result), rng)
    assert retry.total == 1
    assert retry.current_entry.id == "w2"
    assert retry.answers == ()


def test_retry_all(entries, rng):
    session, result = run_session(entries, rng, {"w2"})
    assert retry_all(result) == session.presentation_order
