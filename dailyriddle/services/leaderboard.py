from typing import List

from sqlmodel import Session, select

from ..models import Profile

MAX_ROWS = 50


def get_leaderboard(session: Session, limit: int = MAX_ROWS) -> List[Profile]:
    """
    Seri sıralaması:
    - current_streak azalan, eşitlikte total_correct azalan
    - en fazla 50 satır
    """
    limit = max(1, min(limit, MAX_ROWS))
    return list(
        session.exec(
            select(Profile)
            .order_by(
                Profile.current_streak.desc(),
                Profile.total_correct.desc(),
                Profile.id,
            )
            .limit(limit)
        ).all()
    )
