import uuid
from datetime import datetime, date, time, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Language(str, Enum):
    en = "en"
    ta = "ta"
    ta_en = "ta_en"


class Profile(SQLModel, table=True):
    """
    Kullanıcı profili tablosu:
    - id: UUID string (token'daki "sub" ile aynı)
    - current_streak / longest_streak / total_correct: yalnızca doğru cevapta güncellenir
    """
    __tablename__ = "profiles"

    id: str = Field(default_factory=_uuid, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    language: Language = Language.en
    preferred_time: time = time(9, 0)
    push_enabled: bool = True
    current_streak: int = 0
    longest_streak: int = 0
    total_correct: int = 0
    last_answered_date: Optional[date] = None
    last_riddle_id: Optional[str] = Field(default=None, foreign_key="riddles.id")
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Riddle(SQLModel, table=True):
    """Üç dil varyantlı bilmece. Handler'lar bu tabloyu asla değiştirmez."""
    __tablename__ = "riddles"

    id: str = Field(default_factory=_uuid, primary_key=True)
    text_en: str
    text_ta: str
    text_ta_en: str
    answer: str
    category: str = "general"
    active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    def text_for(self, language: Language) -> str:
        if language == Language.ta:
            return self.text_ta
        if language == Language.ta_en:
            return self.text_ta_en
        return self.text_en


class UserRiddle(SQLModel, table=True):
    """
    Günlük atama kaydı.
    Aynı user_id + assigned_date için tek satır (unique constraint).
    answered_at ve is_correct tek bir UPDATE ile birlikte yazılır.
    """
    __tablename__ = "user_riddles"
    __table_args__ = (
        UniqueConstraint("user_id", "assigned_date", name="uq_user_riddles_user_date"),
    )

    id: str = Field(default_factory=_uuid, primary_key=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    riddle_id: str = Field(foreign_key="riddles.id")
    assigned_date: date
    answered_at: Optional[datetime] = None
    is_correct: Optional[bool] = None
    created_at: datetime = Field(default_factory=_utcnow)


class Fact(SQLModel, table=True):
    __tablename__ = "facts"

    id: str = Field(default_factory=_uuid, primary_key=True)
    category: str = "general"
    fact_text: str
    source: Optional[str] = None
    active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Achievement(SQLModel, table=True):
    __tablename__ = "achievements"

    id: str = Field(default_factory=_uuid, primary_key=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    badge_name: str
    badge_icon: str
    earned_date: datetime = Field(default_factory=_utcnow)


class Follower(SQLModel, table=True):
    """follower_id → following_id yönlü takip kenarı."""
    __tablename__ = "followers"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_followers_pair"),
    )

    id: str = Field(default_factory=_uuid, primary_key=True)
    follower_id: str = Field(foreign_key="profiles.id", index=True)
    following_id: str = Field(foreign_key="profiles.id", index=True)
    follow_date: datetime = Field(default_factory=_utcnow)
