from datetime import date, datetime, time
from typing import Optional, List
from pydantic import BaseModel, Field

from .models import Language


class ApiModel(BaseModel):
    """JSON tarafında camelCase alias, Python tarafında snake_case alan adları."""

    class Config:
        populate_by_name = True
        from_attributes = True


# ----------------------------------------------------
# ÇEKİRDEK: GÜNÜN BİLMECESİ / CEVAP
# ----------------------------------------------------


class GetRiddleRequest(ApiModel):
    user_id: str = Field(alias="userId")


class SubmitAnswerRequest(ApiModel):
    user_id: str = Field(alias="userId")
    riddle_id: str = Field(alias="riddleId")
    answer: str


class RiddleOut(ApiModel):
    """Kanonik cevap yalnızca bilmece cevaplandıktan sonra doldurulur."""
    id: str
    text: str
    text_en: str
    text_ta: str
    text_ta_en: str
    category: str
    answer: Optional[str] = None


class FactOut(ApiModel):
    id: str
    category: str
    fact_text: str
    source: Optional[str] = None


class GetRiddleResponse(ApiModel):
    riddle: Optional[RiddleOut] = None
    answered: bool = False
    is_correct: Optional[bool] = Field(default=None, alias="isCorrect")
    fact: Optional[FactOut] = None


class SubmitAnswerResponse(ApiModel):
    is_correct: bool = Field(alias="isCorrect")
    fact: Optional[FactOut] = None
    answer: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str


# ----------------------------------------------------
# KAYIT / PROFİL / SOSYAL
# ----------------------------------------------------


class RegisterRequest(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    language: Language = Language.en
    preferred_time: time = Field(default=time(9, 0), alias="preferredTime")


class RegisterResponse(ApiModel):
    success: bool
    token: str
    user_id: str = Field(alias="userId")


class SettingsUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    language: Optional[Language] = None
    preferred_time: Optional[time] = Field(default=None, alias="preferredTime")
    push_enabled: Optional[bool] = Field(default=None, alias="pushEnabled")


class ProfileOut(ApiModel):
    id: str
    name: str
    email: str
    language: Language
    preferred_time: time = Field(alias="preferredTime")
    push_enabled: bool = Field(alias="pushEnabled")
    current_streak: int = Field(alias="currentStreak")
    longest_streak: int = Field(alias="longestStreak")
    total_correct: int = Field(alias="totalCorrect")
    last_answered_date: Optional[date] = Field(default=None, alias="lastAnsweredDate")


class PersonRef(ApiModel):
    id: str
    name: str


class AchievementOut(ApiModel):
    id: str
    badge_name: str = Field(alias="badgeName")
    badge_icon: str = Field(alias="badgeIcon")
    earned_date: datetime = Field(alias="earnedDate")


class ProfileOverview(ApiModel):
    profile: ProfileOut
    followers: List[PersonRef]
    following: List[PersonRef]
    achievements: List[AchievementOut]


class LeaderboardRow(ApiModel):
    id: str
    name: str
    current_streak: int = Field(alias="currentStreak")
    total_correct: int = Field(alias="totalCorrect")
