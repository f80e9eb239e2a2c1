# app/api/routers/health.py
from __future__ import annotations

import os
import time
from typing import Any

import requests
from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.infra.db import engine

router = APIRouter()


def _safe_err(e: Exception) -> str:
    s = str(e) or e.__class__.__name__
    # evita vazar url/credenciais (best effort)
    for k in ("postgres://", "postgresql://", "postgresql+psycopg2://"):
        if k in s:
            s = "db_error"
    return s[:300]


@router.head("/health", include_in_schema=False)
def health_head() -> Response:
    # UptimeRobot/health-check costuma usar HEAD. Retorna só status/headers.
    return Response(status_code=200)


@router.get("/health")
def health() -> Any:
    started = time.time()

    # 1) DB check
    db_ok = False
    db_error: str | None = None
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        db_error = _safe_err(e)

    # 2) (Opcional) Brevo check (sem mandar email)
    # Habilita com HEALTH_CHECK_MAIL=1
    mail_ok: bool | None = None
    mail_error: str | None = None

    if os.getenv("HEALTH_CHECK_MAIL", "0") == "1":
        if not settings.BREVO_API_KEY:
            mail_ok = False
            mail_error = "brevo_env_missing"
        else:
            try:
                r = requests.get(
                    "https://api.brevo.com/v3/account",
                    headers={"api-key": settings.BREVO_API_KEY, "accept": "application/json"},
                    timeout=10,
                )
                mail_ok = bool(r.ok)
                if not r.ok:
                    mail_error = f"brevo_http_{r.status_code}"
            except requests.RequestException as e:
                mail_ok = False
                mail_error = _safe_err(e)

    ok = db_ok and (mail_ok in (None, True))
    elapsed_ms = int((time.time() - started) * 1000)

    payload = {
        "ok": ok,
        "db": {"ok": db_ok, "error": db_error},
        "mail": (None if mail_ok is None else {"ok": mail_ok, "error": mail_error}),
        "elapsed_ms": elapsed_ms,
    }

    if not ok:
        return JSONResponse(payload, status_code=503)
    return payload
