from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.infra.db import engine
from app.infra.models import Base

from app.api.routers.auth import router as auth_router
from app.api.routers.users import router as users_router
from app.api.routers.finance import router as finance_router
from app.api.routers.installments import router as installments_router
from app.api.routers.reports import router as reports_router
from app.api.routers.health import router as health_router


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")


# allowed origins can be provided as a comma-separated env var
if settings.FRONTEND_URLS:
    ALLOW_ORIGINS_LIST = [o.strip() for o in settings.FRONTEND_URLS.split(",") if o.strip()]
else:
    ALLOW_ORIGINS_LIST = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


app = FastAPI(title="Finanças Pessoais API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS_LIST,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

logger.info("[CORS] allow_origins = %s", ALLOW_ORIGINS_LIST)


@app.on_event("startup")
def _startup() -> None:
    logger.info("[startup] creating tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("[startup] tables created/checked")


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, prefix="/users", tags=["users"])
app.include_router(finance_router, prefix="/finance", tags=["finance"])
app.include_router(installments_router, prefix="/installments", tags=["installments"])
app.include_router(reports_router, prefix="/reports", tags=["reports"])
app.include_router(health_router, tags=["health"])
