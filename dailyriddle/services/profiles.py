import logging
from datetime import datetime, time, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import EmailTakenError
from ..models import Achievement, Follower, Language, Profile

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "language", "preferred_time", "push_enabled")


def register_profile(
    session: Session,
    name: str,
    email: str,
    language: Language = Language.en,
    preferred_time: time = time(9, 0),
) -> Profile:
    """Yeni profil; e-posta benzersiz olmalı."""
    profile = Profile(
        name=name.strip(),
        email=email.strip().lower(),
        language=language,
        preferred_time=preferred_time,
    )
    session.add(profile)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise EmailTakenError(email)
    session.refresh(profile)
    logger.info("Registered profile", extra={"user_id": profile.id})
    return profile


def update_settings(session: Session, profile: Profile, changes: Dict[str, Any]) -> Profile:
    """Yalnızca gönderilen ayar alanlarını günceller (isim, dil, saat, bildirim)."""
    for key, value in changes.items():
        if key in EDITABLE_FIELDS and value is not None:
            setattr(profile, key, value)
    profile.updated_at = datetime.now(timezone.utc)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def get_followers(session: Session, user_id: str) -> List[Tuple[str, str]]:
    rows = session.exec(
        select(Profile.id, Profile.name)
        .join(Follower, Follower.follower_id == Profile.id)
        .where(Follower.following_id == user_id)
        .order_by(Follower.follow_date.desc())
    ).all()
    return [(r[0], r[1]) for r in rows]


def get_following(session: Session, user_id: str) -> List[Tuple[str, str]]:
    rows = session.exec(
        select(Profile.id, Profile.name)
        .join(Follower, Follower.following_id == Profile.id)
        .where(Follower.follower_id == user_id)
        .order_by(Follower.follow_date.desc())
    ).all()
    return [(r[0], r[1]) for r in rows]


def get_achievements(session: Session, user_id: str) -> List[Achievement]:
    return list(
        session.exec(
            select(Achievement)
            .where(Achievement.user_id == user_id)
            .order_by(Achievement.earned_date.desc())
        ).all()
    )
