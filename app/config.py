from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_db_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL não configurada.")

    # Railway/Heroku: postgres://...
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    # Railway: postgresql://... (sem driver)
    if url.startswith("postgresql://") and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

    return url


class Settings(BaseSettings):
    DATABASE_URL: str

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60
    EMAIL_TOKEN_EXPIRES_MINUTES: int = 60

    # URL pública desta API, usada nos links de confirmação de email
    APP_BASE_URL: str = "http://localhost:8000"

    BREVO_API_KEY: str = ""
    BREVO_SENDER_EMAIL: str = ""
    BREVO_SENDER_NAME: str = ""
    # quem recebe o email de confirmação; vazio = o próprio usuário
    MAIL_APPROVER_EMAIL: str = ""
    MAIL_TIMEOUT: int = 30

    FRONTEND_URLS: str = ""
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",         # local
        env_ignore_empty=True,   # evita sobrescrever com vazio
        extra="ignore",
    )

    def __init__(self, **values):
        super().__init__(**values)
        self.DATABASE_URL = normalize_db_url(self.DATABASE_URL)


settings = Settings()

JWT_SECRET_KEY = settings.JWT_SECRET_KEY
JWT_ALGORITHM = settings.JWT_ALGORITHM
JWT_EXPIRES_MINUTES = settings.JWT_EXPIRES_MINUTES
