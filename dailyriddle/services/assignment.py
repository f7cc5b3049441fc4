import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import NotFoundError
from ..models import Fact, Profile, Riddle, UserRiddle
from .facts import fact_of_the_day
from .selection import pick_for_day

logger = logging.getLogger(__name__)


@dataclass
class TodayRiddle:
    profile: Profile
    riddle: Optional[Riddle]
    answered: bool = False
    is_correct: Optional[bool] = None
    fact: Optional[Fact] = None


def get_profile_or_fail(session: Session, user_id: str) -> Profile:
    profile = session.get(Profile, user_id)
    if not profile:
        raise NotFoundError(f"User {user_id} not found")
    return profile


def find_assignment(session: Session, user_id: str, day: date) -> Optional[Tuple[UserRiddle, Riddle]]:
    """(user_id, gün) için atama + bilmece satırını birlikte okur."""
    return session.exec(
        select(UserRiddle, Riddle)
        .join(Riddle, Riddle.id == UserRiddle.riddle_id)
        .where(
            UserRiddle.user_id == user_id,
            UserRiddle.assigned_date == day,
        )
    ).first()


def pick_riddle(session: Session, user_id: str, day: date) -> Optional[Riddle]:
    riddles = session.exec(
        select(Riddle).where(Riddle.active == True).order_by(Riddle.id)  # noqa: E712
    ).all()
    return pick_for_day(riddles, user_id, day, salt="riddle")


def _from_existing(session: Session, profile: Profile, assignment: UserRiddle, riddle: Riddle) -> TodayRiddle:
    answered = assignment.answered_at is not None
    fact = None
    if answered and assignment.is_correct:
        fact = fact_of_the_day(session, profile.id, assignment.assigned_date)
    return TodayRiddle(
        profile=profile,
        riddle=riddle,
        answered=answered,
        is_correct=assignment.is_correct,
        fact=fact,
    )


def assign_or_fetch_today(session: Session, user_id: str, today: date) -> TodayRiddle:
    """
    Günün bilmecesi:
    - Aynı kullanıcı + aynı gün için atama varsa onu (ve cevap durumunu) döner.
    - Yoksa aktif bilmecelerden birini seçer, atamayı DB'ye yazar.
    - Eşzamanlı iki istekte unique constraint ikinci insert'i reddeder;
      bu durumda kazanan satır yeniden okunur.
    - Aktif bilmece yoksa riddle=None döner (hata değil).
    """
    profile = get_profile_or_fail(session, user_id)

    existing = find_assignment(session, user_id, today)
    if existing:
        assignment, riddle = existing
        return _from_existing(session, profile, assignment, riddle)

    riddle = pick_riddle(session, user_id, today)
    if riddle is None:
        logger.warning("No active riddle available", extra={"user_id": user_id})
        return TodayRiddle(profile=profile, riddle=None)

    rec = UserRiddle(user_id=user_id, riddle_id=riddle.id, assigned_date=today)
    session.add(rec)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.info(
            "Assignment already created by a concurrent request",
            extra={"user_id": user_id, "assigned_date": today},
        )
        existing = find_assignment(session, user_id, today)
        if existing is None:
            raise
        assignment, riddle = existing
        return _from_existing(session, session.get(Profile, user_id), assignment, riddle)

    logger.info(
        "Assigned riddle",
        extra={"user_id": user_id, "riddle_id": riddle.id, "assigned_date": today},
    )
    return TodayRiddle(profile=profile, riddle=riddle)
