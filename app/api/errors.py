from __future__ import annotations

from fastapi import HTTPException

from app.integrations.mailer import MailerError
from app.services.errors import (
    AlreadyPaid,
    Forbidden,
    InvalidCredentials,
    LedgerError,
    NotFound,
    StoreError,
    ValidationError,
)

STATUS_BY_ERROR: dict[type, int] = {
    ValidationError: 400,
    InvalidCredentials: 401,
    Forbidden: 403,
    NotFound: 404,
    AlreadyPaid: 409,
    StoreError: 503,
    MailerError: 502,
}


def to_http(e: Exception) -> HTTPException:
    for cls in type(e).__mro__:
        code = STATUS_BY_ERROR.get(cls)
        if code:
            break
    else:
        code = 500

    # não repassa detalhe de erro de banco/email pro cliente
    if isinstance(e, StoreError):
        return HTTPException(status_code=code, detail="Banco de dados indisponível.")
    if isinstance(e, MailerError):
        return HTTPException(status_code=code, detail="Falha ao enviar email de confirmação.")
    if isinstance(e, LedgerError):
        return HTTPException(status_code=code, detail=str(e))
    return HTTPException(status_code=code, detail="Erro interno do servidor.")
