from dotenv import load_dotenv
from pathlib import Path
import os
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


def get_database_url_env():
    return os.getenv("DATABASE_URL")


def get_db_host_env():
    return os.getenv("DB_HOST")


def get_db_port_env():
    return os.getenv("DB_PORT")


def get_db_user_env():
    return os.getenv("DB_USER")


def get_db_password_env():
    return os.getenv("DB_PASSWORD")


def get_db_name_env():
    return os.getenv("DB_NAME")


def get_db_pool_size_env():
    return os.getenv("DB_POOL_SIZE")


def get_db_pool_timeout_seconds_env():
    return os.getenv("DB_POOL_TIMEOUT_SECONDS")


def get_db_query_timeout_seconds_env():
    return os.getenv("DB_QUERY_TIMEOUT_SECONDS")


def get_db_startup_timeout_seconds_env():
    return os.getenv("DB_STARTUP_TIMEOUT_SECONDS")


def get_db_create_database_env():
    return os.getenv("DB_CREATE_DATABASE")


# TLS toward the database
def get_db_ssl_env():
    return os.getenv("DB_SSL")


def get_db_ssl_verify_env():
    return os.getenv("DB_SSL_VERIFY")


def get_db_ssl_ca_env():
    return os.getenv("DB_SSL_CA")


def get_admin_user_env():
    return os.getenv("ADMIN_USER")


def get_admin_password_env():
    return os.getenv("ADMIN_PASSWORD")


def get_strict_email_validation_env():
    return os.getenv("STRICT_EMAIL_VALIDATION")


def get_id_scheme_env():
    return os.getenv("ID_SCHEME")


def get_rate_limit_enabled_env():
    return os.getenv("RATE_LIMIT_ENABLED")


def get_rate_limit_calls_env():
    return os.getenv("RATE_LIMIT_CALLS")


def get_rate_limit_window_env():
    return os.getenv("RATE_LIMIT_WINDOW")


def get_max_body_bytes_env():
    return os.getenv("MAX_BODY_BYTES")


def get_trust_proxy_headers_env():
    return os.getenv("TRUST_PROXY_HEADERS")


def get_public_directory_env():
    return os.getenv("PUBLIC_DIRECTORY")


def get_log_level_env():
    return os.getenv("LOG_LEVEL")


def env_flag(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except Exception:
        return default


def env_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value is not None else default
    except Exception:
        return default
