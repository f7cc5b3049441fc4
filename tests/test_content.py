from sqlmodel import select

from dailyriddle.models import Fact, Riddle
from dailyriddle.services.content import load_json, seed_content


def test_packaged_riddles_are_complete():
    riddles = load_json("riddles.json")
    assert riddles
    for rec in riddles:
        for key in ("text_en", "text_ta", "text_ta_en", "answer", "category"):
            assert rec[key].strip()


def test_seed_fills_empty_tables(session):
    added = seed_content(session)
    assert added["riddles"] == len(load_json("riddles.json"))
    assert added["facts"] == len(load_json("facts.json"))
    assert all(r.active for r in session.exec(select(Riddle)).all())


def test_seed_is_idempotent(session):
    seed_content(session)
    again = seed_content(session)
    assert again == {"riddles": 0, "facts": 0}
    assert len(session.exec(select(Riddle)).all()) == len(load_json("riddles.json"))


def test_seed_leaves_existing_content_alone(session, riddle):
    added = seed_content(session)
    assert added["riddles"] == 0
    assert added["facts"] > 0
    assert len(session.exec(select(Riddle)).all()) == 1
    assert len(session.exec(select(Fact)).all()) == added["facts"]
