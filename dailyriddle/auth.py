import jwt
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from .config import settings

security = HTTPBearer()


def create_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iss": settings.JWT_ISS,
        "aud": settings.JWT_AUD,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.JWT_EXPIRE_DAYS)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def parse_token(token: str) -> str:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.JWT_AUD,
            issuer=settings.JWT_ISS,
        )
        return payload["sub"]
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_current_user_id(
    creds: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    return parse_token(creds.credentials)


def ensure_same_user(body_user_id: str, current_user_id: str) -> None:
    """Gövdedeki userId, token sahibinden farklıysa isteği reddeder."""
    if body_user_id != current_user_id:
        raise HTTPException(status_code=403, detail="userId does not match token")
