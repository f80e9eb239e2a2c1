from passlib.context import CryptContext

from app.services.errors import ValidationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt só considera os primeiros 72 bytes
BCRYPT_MAX_BYTES = 72


def _too_long(raw: str) -> bool:
    return len(raw.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password(raw: str) -> str:
    if _too_long(raw):
        raise ValidationError("Senha muito longa. Use uma senha menor.")
    return pwd_context.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    if _too_long(raw):
        return False
    return pwd_context.verify(raw, hashed)
