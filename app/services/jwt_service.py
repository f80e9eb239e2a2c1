from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from app.config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_EXPIRES_MINUTES, settings

ACCESS_PURPOSE = "access"
EMAIL_CONFIRM_PURPOSE = "email_confirm"


def _encode(payload: dict, minutes: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **payload,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_access_token(*, sub: str, email: str) -> str:
    return _encode(
        {
            "sub": sub,               # user_id (string)
            "email": email,
            "purpose": ACCESS_PURPOSE,
        },
        JWT_EXPIRES_MINUTES,
    )


def create_email_token(*, email: str) -> str:
    return _encode(
        {"email": email, "purpose": EMAIL_CONFIRM_PURPOSE},
        settings.EMAIL_TOKEN_EXPIRES_MINUTES,
    )


def decode_token(token: str, *, purpose: str) -> dict:
    """Valida assinatura/expiração e o propósito do token. Levanta JWTError."""
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    if payload.get("purpose") != purpose:
        raise JWTError("Token com propósito inválido.")
    return payload
