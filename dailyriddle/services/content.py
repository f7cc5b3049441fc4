import json
import logging
from pathlib import Path
from typing import Dict

from sqlmodel import Session, select

from ..models import Fact, Riddle

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

logger = logging.getLogger(__name__)


def load_json(name: str) -> list:
    """dailyriddle/data içinden JSON dosyası yükler."""
    with open(DATA_DIR / name, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_content(session: Session) -> Dict[str, int]:
    """
    Boş riddles / facts tablolarını paketle gelen içerikle doldurur.
    İçinde satır olan tabloya dokunulmaz; tekrar çalıştırmak güvenlidir.
    """
    added = {"riddles": 0, "facts": 0}

    if session.exec(select(Riddle).limit(1)).first() is None:
        for rec in load_json("riddles.json"):
            session.add(Riddle(**rec))
            added["riddles"] += 1

    if session.exec(select(Fact).limit(1)).first() is None:
        for rec in load_json("facts.json"):
            session.add(Fact(**rec))
            added["facts"] += 1

    session.commit()
    if added["riddles"] or added["facts"]:
        logger.info("Seeded %d riddles, %d facts", added["riddles"], added["facts"])
    return added
