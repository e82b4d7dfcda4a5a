import random
from datetime import datetime, timedelta

import pytest

from kotoba.errors import (
    ConfirmationRequiredError,
    EmptySelectionError,
    InvalidStateError,
    SessionNotFoundError,
    ValidationFailedError,
)
from kotoba.registry import SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry(30, lambda: random.Random(3))


def finish(registry, session_id, wrong_ids=()):
    outcome = None
    while outcome is None or not outcome.completed:
        entry = registry.require(session_id).session.current_entry
        meaning = "x" if entry.id in wrong_ids else entry.meaning
        outcome = registry.submit(session_id, entry.reading, meaning)
    return outcome


def test_start_and_prompt(registry, entries):
    session_id, record = registry.start("l1", entries)
    prompt = registry.prompt(session_id)
    assert prompt.list_id == "l1"
    assert prompt.term == record.session.current_entry.term
    assert prompt.total == 4


def test_empty_start_registers_nothing(registry):
    with pytest.raises(EmptySelectionError):
        registry.start("l1", [])
    assert registry.records == {}


def test_start_replaces_previous(registry, entries):
    old_id, _ = registry.start("l1", entries)
    new_id, _ = registry.start("l1", entries, replaces=old_id)
    assert registry.get(old_id) is None
    assert registry.get(new_id) is not None


def test_unknown_session(registry):
    assert registry.get(None) is None
    with pytest.raises(SessionNotFoundError):
        registry.prompt("ghost")


def test_expired_session_removed(registry, entries):
    session_id, record = registry.start("l1", entries)
    record.created_at = datetime.now() - timedelta(minutes=31)
    assert registry.get(session_id) is None
    assert session_id not in registry.records


def test_submit_until_result(registry, entries):
    session_id, _ = registry.start("l1", entries)
    outcome = finish(registry, session_id, wrong_ids={"w4"})
    assert outcome.result.correct_count == 3
    assert outcome.result.score == 75
    assert registry.result(session_id) is outcome.result


def test_result_before_finish(registry, entries):
    session_id, _ = registry.start("l1", entries)
    with pytest.raises(InvalidStateError):
        registry.result(session_id)


def test_retry_incorrect(registry, entries):
    session_id, _ = registry.start("l1", entries)
    finish(registry, session_id, wrong_ids={"w2", "w3"})
    retry_id, record = registry.retry(session_id, "incorrect")
    assert retry_id != session_id
    assert registry.get(session_id) is None
    assert record.list_id == "l1"
    assert sorted(e.id for e in record.session.presentation_order) == ["w2", "w3"]


def test_retry_unknown_mode(registry, entries):
    session_id, _ = registry.start("l1", entries)
    finish(registry, session_id)
    with pytest.raises(ValidationFailedError):
        registry.retry(session_id, "some")


def test_cancel(registry, entries):
    session_id, record = registry.start("l1", entries)
    with pytest.raises(ConfirmationRequiredError):
        registry.cancel(session_id, confirm=lambda prompt: False)
    assert registry.get(session_id) is record
    registry.cancel(session_id)
    assert registry.get(session_id) is None
