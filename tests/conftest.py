import os

# precisa estar no ambiente antes de qualquer import de app.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["APP_BASE_URL"] = "http://testserver"
os.environ["LOG_LEVEL"] = "WARNING"
