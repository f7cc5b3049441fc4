from datetime import date, datetime, timezone
from typing import Generator
from zoneinfo import ZoneInfo

from sqlmodel import Session

from .config import settings
from .db import get_session


def get_db() -> Generator[Session, None, None]:
    yield from get_session()


def get_today() -> date:
    """Uygulama saat dilimine (DEFAULT_TZ) göre bugünün tarihi."""
    return datetime.now(ZoneInfo(settings.DEFAULT_TZ)).date()


def get_now() -> datetime:
    return datetime.now(timezone.utc)
