import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "5000"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./educollab.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS", "http://localhost:5173"))

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Accounts registered with one of these emails start out as admins.
ADMIN_EMAILS = {email.lower() for email in _get_list(os.getenv("ADMIN_EMAILS"))}


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if JWT_EXPIRES_MINUTES <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be a positive number of minutes.")
