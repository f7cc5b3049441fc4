from typing import Generator

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from .config import settings


def build_engine(url: str, connect_timeout: int = 5) -> Engine:
    """
    Veritabanı motoru:
    - SQLite için aynı bağlantının farklı thread'lerden kullanımına izin verilir
    - Bağlantı zaman aşımı kısa tutulur; hata yeniden denenmeden yukarı iletilir
    """
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": connect_timeout}
    else:
        connect_args = {"connect_timeout": connect_timeout}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL, settings.DB_CONNECT_TIMEOUT)


def init_db(bind: Engine = engine) -> None:
    """Tabloları (yoksa) oluşturur."""
    # tablo sınıflarının metadata'ya kaydı için
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
