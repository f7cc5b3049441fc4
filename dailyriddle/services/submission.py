import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..config import settings
from ..errors import AlreadyAnsweredError, InvalidRequestError, NotFoundError
from ..models import Fact, Profile, Riddle, UserRiddle
from .assignment import get_profile_or_fail
from .facts import fact_of_the_day

logger = logging.getLogger(__name__)


@dataclass
class AnswerResult:
    is_correct: bool
    fact: Optional[Fact] = None
    answer: Optional[str] = None


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def is_correct_answer(submitted: str, canonical: str) -> bool:
    """Büyük/küçük harf ve baştaki/sondaki boşluklar önemsiz; başka esneklik yok."""
    return normalize_answer(submitted) == normalize_answer(canonical)


def streak_update(user_id: str, riddle_id: str, today: date, now: datetime, reset_on_gap: bool):
    """
    Seri alanları tek bir UPDATE içinde, eski satır değerlerinden
    hesaplanan SQL ifadeleriyle yazılır.
    SET sırası sabittir: current_streak ve last_answered_date'i okuyan
    longest_streak önce gelir (MySQL atamaları soldan sağa uygular).
    """
    if reset_on_gap:
        new_streak = case(
            (Profile.last_answered_date == today - timedelta(days=1), Profile.current_streak + 1),
            else_=1,
        )
    else:
        new_streak = Profile.current_streak + 1

    return (
        update(Profile)
        .where(Profile.id == user_id)
        .ordered_values(
            (Profile.longest_streak, case(
                (new_streak > Profile.longest_streak, new_streak),
                else_=Profile.longest_streak,
            )),
            (Profile.current_streak, new_streak),
            (Profile.total_correct, Profile.total_correct + 1),
            (Profile.last_answered_date, today),
            (Profile.last_riddle_id, riddle_id),
            (Profile.updated_at, now),
        )
        .execution_options(synchronize_session=False)
    )


def submit_answer(
    session: Session,
    user_id: str,
    riddle_id: str,
    answer: str,
    today: date,
    now: datetime,
    reset_on_gap: Optional[bool] = None,
) -> AnswerResult:
    """
    Cevap gönderimi:
    - Cevap boş olamaz, bilmece ve bugünkü atama mevcut olmalı.
    - Sonuç, atama satırına yalnızca answered_at NULL iken yazılır (ilk cevap geçerli).
    - Doğru cevapta seri / en uzun seri / toplam doğru aynı transaction'da güncellenir
      ve günün ödül bilgisi döner.
    """
    if reset_on_gap is None:
        reset_on_gap = settings.STREAK_RESET_ON_GAP

    if not answer or not answer.strip():
        raise InvalidRequestError("Answer must not be empty")

    get_profile_or_fail(session, user_id)

    riddle = session.get(Riddle, riddle_id)
    if not riddle:
        raise NotFoundError(f"Riddle {riddle_id} not found")

    assignment = session.exec(
        select(UserRiddle).where(
            UserRiddle.user_id == user_id,
            UserRiddle.assigned_date == today,
        )
    ).first()
    if not assignment:
        raise NotFoundError("No riddle assigned for today")
    if assignment.riddle_id != riddle_id:
        raise InvalidRequestError("Riddle is not today's assigned riddle")

    correct = is_correct_answer(answer, riddle.answer)

    try:
        result = session.exec(
            update(UserRiddle)
            .where(
                UserRiddle.id == assignment.id,
                UserRiddle.answered_at.is_(None),
            )
            .values(answered_at=now, is_correct=correct)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise AlreadyAnsweredError("Today's riddle has already been answered")

        if correct:
            session.exec(streak_update(user_id, riddle_id, today, now, reset_on_gap))
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info(
        "Answer recorded (correct=%s)",
        correct,
        extra={"user_id": user_id, "riddle_id": riddle_id, "assigned_date": today},
    )

    if not correct:
        return AnswerResult(is_correct=False, answer=riddle.answer)
    return AnswerResult(
        is_correct=True,
        fact=fact_of_the_day(session, user_id, today),
        answer=riddle.answer,
    )
