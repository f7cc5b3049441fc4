from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    JWT_SECRET: str = "change-this-please-with-a-long-random-secret"
    JWT_ISS: str = "dailyriddle"
    JWT_AUD: str = "authenticated"
    JWT_EXPIRE_DAYS: int = 30
    DATABASE_URL: str = "sqlite:///./dailyriddle.db"
    DB_CONNECT_TIMEOUT: int = 5
    DEFAULT_TZ: str = "UTC"

    # "user": herkese kendi bilmecesi, "global": günün bilmecesi herkes için aynı
    SELECTION_SCOPE: str = "user"
    STREAK_RESET_ON_GAP: bool = False
    LEADERBOARD_LIMIT: int = 50
    SEED_ON_STARTUP: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"

settings = Settings()
