import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _is_development() -> bool:
    return os.getenv("ENVIRONMENT", "").strip().lower() == "development"


def _resolve_database_url() -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    if _is_development():
        return "postgresql+psycopg://localhost:5434/document_registry"

    raise ValueError(
        "DATABASE_URL is not set. Set DATABASE_URL for non-development "
        "environments or set ENVIRONMENT=development for local defaults."
    )


def _resolve_jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if secret:
        return secret

    if _is_development():
        return "development-only-secret"

    raise ValueError(
        "JWT_SECRET is not set. Set JWT_SECRET for non-development "
        "environments or set ENVIRONMENT=development for local defaults."
    )


def _to_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = _resolve_database_url()
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    # Bearer tokens
    jwt_secret: str = _resolve_jwt_secret()
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    jwt_expiry_seconds: int = int(os.getenv("JWT_EXPIRY_SECONDS", "86400"))  # 1 day

    # Numbering
    number_min_width: int = int(os.getenv("NUMBER_MIN_WIDTH", "4"))
    number_sequence_name: str = os.getenv("NUMBER_SEQUENCE_NAME", "documents")
    reservation_max_batch: int = int(os.getenv("RESERVATION_MAX_BATCH", "50"))
    reservation_ttl_days: int = int(os.getenv("RESERVATION_TTL_DAYS", "7"))

    # Listings
    recent_documents_limit: int = int(os.getenv("RECENT_DOCUMENTS_LIMIT", "5"))
    audit_log_list_limit: int = int(os.getenv("AUDIT_LOG_LIST_LIMIT", "1000"))

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    celery_result_backend: str = os.getenv(
        "CELERY_RESULT_BACKEND", "redis://localhost:6379/1"
    )
    celery_task_always_eager: bool = _to_bool(
        os.getenv("CELERY_TASK_ALWAYS_EAGER", "false")
    )

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_json: bool = _to_bool(os.getenv("LOG_JSON", "false"))


settings = Settings()
