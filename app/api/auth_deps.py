from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.api.deps import DBSession
from app.infra.models import UserORM, UserStatus
from app.services.jwt_service import ACCESS_PURPOSE, decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = DBSession,
) -> UserORM:
    cred_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token, purpose=ACCESS_PURPOSE)
        sub = payload.get("sub")
        if not sub:
            raise cred_exc
        user_id = int(sub)
    except (JWTError, ValueError):
        raise cred_exc

    user = db.get(UserORM, user_id)
    if not user:
        raise cred_exc
    if user.status != UserStatus.LIBERADO:
        raise HTTPException(status_code=403, detail="Conta não está liberada.")
    return user
