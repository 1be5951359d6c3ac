import ssl
from urllib.parse import urlsplit

from sqlalchemy.engine import URL

from utils.get_env import (
    env_flag,
    env_int,
    get_database_url_env,
    get_db_host_env,
    get_db_name_env,
    get_db_password_env,
    get_db_port_env,
    get_db_ssl_ca_env,
    get_db_ssl_env,
    get_db_ssl_verify_env,
    get_db_user_env,
)

DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 3306
DEFAULT_DB_USER = "root"
DEFAULT_DB_NAME = "svrx_db"


def normalize_database_url(database_url: str) -> str:
    """Rewrite plain scheme names to the async driver SQLAlchemy should use."""
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("mysql://"):
        return database_url.replace("mysql://", "mysql+aiomysql://", 1)
    return database_url


def build_mysql_url() -> str:
    url = URL.create(
        "mysql+aiomysql",
        username=get_db_user_env() or DEFAULT_DB_USER,
        password=get_db_password_env() or None,
        host=get_db_host_env() or DEFAULT_DB_HOST,
        port=env_int(get_db_port_env(), DEFAULT_DB_PORT),
        database=get_db_name_env() or DEFAULT_DB_NAME,
        query={"charset": "utf8mb4"},
    )
    return url.render_as_string(hide_password=False)


def build_ssl_context() -> ssl.SSLContext | None:
    """
    TLS posture toward the database.

    DB_SSL turns TLS on; DB_SSL_VERIFY=false keeps the channel encrypted but
    skips certificate and hostname checks.
    """
    if not env_flag(get_db_ssl_env(), False):
        return None
    context = ssl.create_default_context(cafile=get_db_ssl_ca_env() or None)
    if not env_flag(get_db_ssl_verify_env(), True):
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def get_database_url_and_connect_args() -> tuple[str, dict]:
    database_url = get_database_url_env()
    if database_url:
        database_url = normalize_database_url(database_url.strip())
    else:
        database_url = build_mysql_url()

    try:
        split_result = urlsplit(database_url)
    except ValueError as exc:
        raise RuntimeError(
            "Database URL is malformed. If your password has special characters "
            "(@, :, /, ?, #, [, ]), URL-encode it before putting it in DATABASE_URL."
        ) from exc

    connect_args = {}
    if split_result.scheme.startswith("sqlite"):
        return database_url, connect_args

    if not split_result.hostname:
        raise RuntimeError("Database URL is invalid: hostname is missing.")

    ssl_context = build_ssl_context()
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context

    return database_url, connect_args
