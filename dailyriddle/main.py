import logging
from datetime import date, datetime
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Query, Request, Response
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .db import engine, init_db
from .errors import EmailTakenError, NotFoundError, RiddleAppError
from .logs import setup_logging
from .models import Fact, Language, Riddle
from .schemas import (
    AchievementOut,
    ErrorResponse,
    FactOut,
    GetRiddleRequest,
    GetRiddleResponse,
    LeaderboardRow,
    PersonRef,
    ProfileOut,
    ProfileOverview,
    RegisterRequest,
    RegisterResponse,
    RiddleOut,
    SettingsUpdate,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from .auth import create_token, ensure_same_user, get_current_user_id
from .deps import get_db, get_now, get_today
from .services.assignment import assign_or_fetch_today, get_profile_or_fail
from .services.content import seed_content
from .services.leaderboard import get_leaderboard
from .services.profiles import (
    get_achievements,
    get_followers,
    get_following,
    register_profile,
    update_settings,
)
from .services.submission import submit_answer as record_answer

logger = logging.getLogger("dailyriddle")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

CORE_PATHS = {"/api/v1/get-riddle", "/api/v1/submit-answer"}


app = FastAPI(
    title="Daily Riddle API",
    version="1.0.0",
    description="Günlük bilmece, seri ve ödül bilgisi servisi"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.on_event("startup")
def on_startup():
    """Uygulama ayağa kalkarken log ayarı, DB tabloları ve başlangıç içeriği."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    init_db()
    if settings.SEED_ON_STARTUP:
        with Session(engine) as session:
            seed_content(session)
    logger.info("Startup complete")


# ----------------------------------------------------
# HATA EŞLEME
# Çekirdek uçlar tüm hataları {"error": mesaj} + 500 olarak döner.
# ----------------------------------------------------


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message}, headers=CORS_HEADERS)


@app.exception_handler(RiddleAppError)
async def riddle_error_handler(request: Request, exc: RiddleAppError):
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return _error(exc.message)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s", request.url.path)
    return _error(f"Store error: {exc.__class__.__name__}")


@app.exception_handler(StarletteHTTPException)
async def core_http_error_handler(request: Request, exc: StarletteHTTPException):
    """Çekirdek uçlarda yetki hataları da {"error"} zarfıyla döner, durum kodu korunur."""
    if request.url.path in CORE_PATHS:
        headers = {**CORS_HEADERS, **(exc.headers or {})}
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=headers)
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    if request.url.path in CORE_PATHS:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}" for err in exc.errors()
        )
        return _error(f"Invalid request: {problems}")
    return await request_validation_exception_handler(request, exc)


@app.get("/")
def root():
    return {"status": "ok", "app": "Daily Riddle API"}


def riddle_out(riddle: Optional[Riddle], language: Language, reveal_answer: bool = False) -> Optional[RiddleOut]:
    if riddle is None:
        return None
    return RiddleOut(
        id=riddle.id,
        text=riddle.text_for(language),
        text_en=riddle.text_en,
        text_ta=riddle.text_ta,
        text_ta_en=riddle.text_ta_en,
        category=riddle.category,
        answer=riddle.answer if reveal_answer else None,
    )


def fact_out(fact: Optional[Fact]) -> Optional[FactOut]:
    if fact is None:
        return None
    return FactOut.model_validate(fact)


# ----------------------------------------------------
# GÜNÜN BİLMECESİ ENDPOINT
# ----------------------------------------------------


@app.options("/api/v1/get-riddle")
@app.options("/api/v1/submit-answer")
def preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post(
    "/api/v1/get-riddle",
    response_model=GetRiddleResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_riddle(
    payload: GetRiddleRequest,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Günün bilmecesi:
    - Bugün için atama varsa aynı bilmece + cevap durumu
    - Doğru cevaplanmışsa günün ödül bilgisi
    - Yoksa yeni atama (answered=false)
    """
    ensure_same_user(payload.user_id, current_user_id)

    result = assign_or_fetch_today(db, payload.user_id, today)

    return GetRiddleResponse(
        riddle=riddle_out(result.riddle, result.profile.language, reveal_answer=result.answered),
        answered=result.answered,
        is_correct=result.is_correct,
        fact=fact_out(result.fact),
    )


# ----------------------------------------------------
# CEVAP GÖNDERME ENDPOINT
# ----------------------------------------------------


@app.post(
    "/api/v1/submit-answer",
    response_model=SubmitAnswerResponse,
    responses={500: {"model": ErrorResponse}},
)
def submit_answer(
    payload: SubmitAnswerRequest,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    now: datetime = Depends(get_now),
):
    """
    Cevap kontrolü (büyük/küçük harf ve boşluk duyarsız):
    - Doğruysa seri +1 ve ödül bilgisi
    - Yanlışsa profil değişmez, fact=null
    """
    ensure_same_user(payload.user_id, current_user_id)

    result = record_answer(db, payload.user_id, payload.riddle_id, payload.answer, today, now)

    return SubmitAnswerResponse(
        is_correct=result.is_correct,
        fact=fact_out(result.fact),
        answer=result.answer,
    )


# ----------------------------------------------------
# KAYIT / REGISTER ENDPOINT
# ----------------------------------------------------


@app.post("/api/v1/register", response_model=RegisterResponse)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
):
    """
    Kullanıcı kaydı:
    - Profil oluşturulur (seri alanları 0)
    - JWT token döner
    """
    try:
        profile = register_profile(
            db,
            name=payload.name,
            email=payload.email,
            language=payload.language,
            preferred_time=payload.preferred_time,
        )
    except EmailTakenError:
        raise HTTPException(status_code=409, detail="Email already registered")

    return RegisterResponse(
        success=True,
        token=create_token(profile.id),
        user_id=profile.id,
    )


# ----------------------------------------------------
# PROFİL / AYARLAR / SOSYAL
# ----------------------------------------------------


def _load_profile(db: Session, user_id: str):
    try:
        return get_profile_or_fail(db, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@app.get("/api/v1/profile", response_model=ProfileOut)
def read_profile(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ProfileOut.model_validate(_load_profile(db, current_user_id))


@app.patch("/api/v1/profile", response_model=ProfileOut)
def patch_profile(
    payload: SettingsUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Ayarlar ekranı: isim, dil, bildirim saati, bildirim açık/kapalı."""
    profile = _load_profile(db, current_user_id)
    profile = update_settings(db, profile, payload.model_dump(exclude_unset=True))
    return ProfileOut.model_validate(profile)


@app.get("/api/v1/profile/overview", response_model=ProfileOverview)
def profile_overview(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Profil ekranı: takipçiler, takip edilenler ve rozetler (en yeni önce)."""
    profile = _load_profile(db, current_user_id)
    return ProfileOverview(
        profile=ProfileOut.model_validate(profile),
        followers=[PersonRef(id=i, name=n) for i, n in get_followers(db, current_user_id)],
        following=[PersonRef(id=i, name=n) for i, n in get_following(db, current_user_id)],
        achievements=[AchievementOut.model_validate(a) for a in get_achievements(db, current_user_id)],
    )


# ----------------------------------------------------
# LİDERLİK TABLOSU
# ----------------------------------------------------


@app.get("/api/v1/leaderboard", response_model=list[LeaderboardRow])
def leaderboard(
    limit: int = Query(default=settings.LEADERBOARD_LIMIT, ge=1, le=50),
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [LeaderboardRow.model_validate(p) for p in get_leaderboard(db, limit)]
