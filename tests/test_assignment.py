from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from dailyriddle.errors import NotFoundError
from dailyriddle.models import Riddle, UserRiddle
from dailyriddle.services import assignment as assignment_service
from dailyriddle.services.assignment import assign_or_fetch_today

from conftest import NOW, TODAY


def _assignments(session, user_id):
    return session.exec(select(UserRiddle).where(UserRiddle.user_id == user_id)).all()


def test_assigns_new_riddle(session, user, riddle):
    result = assign_or_fetch_today(session, user.id, TODAY)
    assert result.riddle.id == riddle.id
    assert result.answered is False
    assert result.is_correct is None
    assert result.fact is None
    rows = _assignments(session, user.id)
    assert len(rows) == 1
    assert rows[0].assigned_date == TODAY
    assert rows[0].answered_at is None


def test_second_call_same_day_is_idempotent(session, user, riddle):
    session.add(Riddle(text_en="b", text_ta="b", text_ta_en="b", answer="b"))
    session.commit()
    first = assign_or_fetch_today(session, user.id, TODAY)
    second = assign_or_fetch_today(session, user.id, TODAY)
    assert first.riddle.id == second.riddle.id
    assert len(_assignments(session, user.id)) == 1


def test_new_day_gets_new_assignment(session, user, riddle):
    assign_or_fetch_today(session, user.id, TODAY)
    assign_or_fetch_today(session, user.id, TODAY + timedelta(days=1))
    assert len(_assignments(session, user.id)) == 2


def test_inactive_riddles_are_never_assigned(session, user):
    session.add(Riddle(text_en="x", text_ta="x", text_ta_en="x", answer="x", active=False))
    session.commit()
    result = assign_or_fetch_today(session, user.id, TODAY)
    assert result.riddle is None
    assert result.answered is False
    assert _assignments(session, user.id) == []


def test_unknown_user_raises_not_found(session, riddle):
    with pytest.raises(NotFoundError):
        assign_or_fetch_today(session, "no-such-user", TODAY)


def test_answered_correct_returns_fact(session, user, riddle, fact):
    session.add(UserRiddle(
        user_id=user.id,
        riddle_id=riddle.id,
        assigned_date=TODAY,
        answered_at=NOW,
        is_correct=True,
    ))
    session.commit()
    result = assign_or_fetch_today(session, user.id, TODAY)
    assert result.answered is True
    assert result.is_correct is True
    assert result.fact.id == fact.id


def test_answered_incorrect_returns_no_fact(session, user, riddle, fact):
    session.add(UserRiddle(
        user_id=user.id,
        riddle_id=riddle.id,
        assigned_date=TODAY,
        answered_at=NOW,
        is_correct=False,
    ))
    session.commit()
    result = assign_or_fetch_today(session, user.id, TODAY)
    assert result.answered is True
    assert result.is_correct is False
    assert result.fact is None


# --- Concurrency / uniqueness ---


def test_store_rejects_duplicate_assignment(session, user, riddle):
    session.add(UserRiddle(user_id=user.id, riddle_id=riddle.id, assigned_date=TODAY))
    session.commit()
    session.add(UserRiddle(user_id=user.id, riddle_id=riddle.id, assigned_date=TODAY))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()
    assert len(_assignments(session, user.id)) == 1


def test_concurrent_insert_returns_winning_row(session, user, riddle, monkeypatch):
    """A request that read 'no assignment' before a concurrent insert reuses that row."""
    other = Riddle(text_en="o", text_ta="o", text_ta_en="o", answer="o")
    session.add(other)
    session.commit()
    session.add(UserRiddle(user_id=user.id, riddle_id=other.id, assigned_date=TODAY))
    session.commit()

    real_find = assignment_service.find_assignment
    calls = {"n": 0}

    def stale_find(sess, user_id, day):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(sess, user_id, day)

    monkeypatch.setattr(assignment_service, "find_assignment", stale_find)
    monkeypatch.setattr(assignment_service, "pick_riddle", lambda sess, uid, day: sess.get(Riddle, riddle.id))

    result = assign_or_fetch_today(session, user.id, TODAY)

    assert result.riddle.id == other.id
    assert result.answered is False
    assert len(_assignments(session, user.id)) == 1
