from fastapi import Depends
from sqlalchemy.orm import Session

from app.infra.db import get_db
from app.infra.ledger_store import SqlLedgerStore
from app.integrations.mailer import send_email

DBSession = Depends(get_db)


def get_store(db: Session = DBSession) -> SqlLedgerStore:
    return SqlLedgerStore(db)


def get_mailer():
    return send_email


Store = Depends(get_store)
Mailer = Depends(get_mailer)
