from datetime import date
from typing import Optional

from sqlmodel import Session, select

from ..models import Fact
from .selection import pick_for_day


def fact_of_the_day(session: Session, user_id: str, day: date) -> Optional[Fact]:
    """Ödül bilgisi: aktif bilgiler arasından kullanıcı + gün için sabit seçim."""
    facts = session.exec(
        select(Fact).where(Fact.active == True).order_by(Fact.id)  # noqa: E712
    ).all()
    return pick_for_day(facts, user_id, day, salt="fact")
