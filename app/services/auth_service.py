from __future__ import annotations

import logging
from typing import Callable, Tuple
from urllib.parse import urlencode

from jose import JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.infra.models import UserORM, UserStatus
from app.integrations.mailer import confirmation_email_html
from app.services.errors import Forbidden, InvalidCredentials, NotFound, ValidationError
from app.services.jwt_service import (
    EMAIL_CONFIRM_PURPOSE,
    create_access_token,
    create_email_token,
    decode_token,
)
from app.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)

SendEmail = Callable[[str, str, str], None]

CONFIRM_ACTIONS = {
    "accept": UserStatus.LIBERADO,
    "reject": UserStatus.RECUSADO,
}


def _confirm_link(user_id: int, token: str, action: str) -> str:
    base = settings.APP_BASE_URL.rstrip("/")
    query = urlencode({"option": user_id, "token": token, "action": action})
    return f"{base}/auth/validate-email?{query}"


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    send_email: SendEmail,
) -> UserORM:
    name = (name or "").strip()
    email = (email or "").strip().lower()
    if not name or not email or not password:
        raise ValidationError("Todos os campos são obrigatórios.")

    exists = db.scalar(select(UserORM.id).where(UserORM.email == email))
    if exists:
        raise ValidationError("E-mail já está em uso.")

    user = UserORM(
        name=name,
        email=email,
        password_hash=hash_password(password),
        status=UserStatus.VERIFICACAOPENDENTE,
    )
    db.add(user)
    db.flush()

    token = create_email_token(email=user.email)
    html = confirmation_email_html(
        user_email=user.email,
        accept_url=_confirm_link(user.id, token, "accept"),
        reject_url=_confirm_link(user.id, token, "reject"),
    )
    # se o envio falhar a exceção sobe e get_db desfaz o cadastro
    to = settings.MAIL_APPROVER_EMAIL.strip() or user.email
    send_email(to, "Confirmação de Cadastro", html)

    logger.info("auth: usuário %s cadastrado, aguardando confirmação", user.id)
    return user


def confirm_email(db: Session, *, user_id, token: str, action: str) -> UserORM:
    if not user_id or not token or not action:
        raise ValidationError("Link inválido ou incompleto.")

    try:
        payload = decode_token(token, purpose=EMAIL_CONFIRM_PURPOSE)
    except JWTError:
        raise ValidationError("Token inválido ou expirado.")

    new_status = CONFIRM_ACTIONS.get(action)
    if new_status is None:
        raise ValidationError("Ação inválida.")

    try:
        uid = int(user_id)
    except (TypeError, ValueError):
        raise ValidationError("Link inválido ou incompleto.")

    user = db.get(UserORM, uid)
    if not user:
        raise NotFound("Usuário não encontrado.")
    if payload.get("email") != user.email:
        raise ValidationError("Token inválido ou expirado.")

    user.status = new_status
    db.flush()
    logger.info("auth: usuário %s -> %s", user.id, new_status.value)
    return user


def authenticate(db: Session, *, email: str, password: str) -> Tuple[str, UserORM]:
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError("E-mail e senha são obrigatórios.")

    user = db.execute(select(UserORM).where(UserORM.email == email)).scalars().first()
    if not user:
        raise NotFound("Usuário não encontrado.")

    if user.status != UserStatus.LIBERADO:
        logger.warning("auth: login recusado para usuário %s (status=%s)", user.id, user.status.value)
        raise Forbidden("Conta não está liberada para login.")

    if not verify_password(password, user.password_hash):
        raise InvalidCredentials("Credenciais inválidas.")

    token = create_access_token(sub=str(user.id), email=user.email)
    return token, user
