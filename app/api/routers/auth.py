from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import DBSession, Mailer
from app.api.errors import to_http
from app.integrations.mailer import MailerError
from app.schemas.auth import LoginIn, MessageOut, RegisterIn, RegisterOut, TokenOut
from app.services.auth_service import authenticate, confirm_email, register_user
from app.services.errors import LedgerError

router = APIRouter()


@router.post("/register", response_model=RegisterOut, status_code=201)
def register(payload: RegisterIn, db: Session = DBSession, send_email=Mailer):
    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            send_email=send_email,
        )
    except (LedgerError, MailerError) as e:
        raise to_http(e)

    return RegisterOut(
        message="Usuário cadastrado com sucesso! Verifique seu e-mail para validar a conta.",
        user_id=user.id,
    )


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = DBSession):
    try:
        token, user = authenticate(db, email=payload.email, password=payload.password)
    except LedgerError as e:
        raise to_http(e)
    return TokenOut(access_token=token, account_id=user.id)


@router.get("/validate-email", response_model=MessageOut)
def validate_email(
    db: Session = DBSession,
    option: str = Query(default=""),
    token: str = Query(default=""),
    action: str = Query(default=""),
):
    try:
        confirm_email(db, user_id=option, token=token, action=action)
    except LedgerError as e:
        raise to_http(e)

    if action == "accept":
        return MessageOut(message="Conta ativada com sucesso!")
    return MessageOut(message="Conta recusada com sucesso.")
