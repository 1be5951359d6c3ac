import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, select

from models.sql.suggestion import SuggestionModel
from services.errors import PersistenceError
from utils.db_utils import get_database_url_and_connect_args
from utils.get_env import (
    env_flag,
    env_float,
    env_int,
    get_db_create_database_env,
    get_db_pool_size_env,
    get_db_pool_timeout_seconds_env,
    get_db_query_timeout_seconds_env,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_LIST_LIMIT = 1000
ADMIN_LIST_LIMIT = 300
MAX_LIST_LIMIT = API_LIST_LIMIT

DEFAULT_POOL_SIZE = 10
DEFAULT_POOL_TIMEOUT_SECONDS = 30.0
DEFAULT_QUERY_TIMEOUT_SECONDS = 10.0

REQUIRED_COLUMNS = ("id", "name", "email", "type", "message", "created_at")
COLUMN_LENGTHS = {
    column.name: column.type.length
    for column in SuggestionModel.__table__.columns
    if getattr(column.type, "length", None)
}


def check_record_constraints(record: SuggestionModel) -> None:
    """Enforce required/length rules the same way on every backend."""
    # Over-long values are rejected, not truncated, impact included; the
    # caller gets a 500 the same as MySQL strict mode would give.
    for column in REQUIRED_COLUMNS:
        if not getattr(record, column, None):
            raise PersistenceError(f"Column {column!r} is required", operation="insert")
    for column, length in COLUMN_LENGTHS.items():
        value = getattr(record, column, None) or ""
        if len(value) > length:
            raise PersistenceError(
                f"Column {column!r} exceeds {length} characters ({len(value)})",
                operation="insert",
            )


class StorageGateway:
    """
    Append-only store for suggestions behind a bounded async connection pool.

    Callers beyond the pool size wait up to `pool_timeout` seconds for a
    connection. Every call is bounded by `query_timeout`; expiry, driver
    errors and constraint violations all surface as PersistenceError.
    """

    def __init__(
        self,
        database_url: str,
        connect_args: dict | None = None,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        pool_timeout: float = DEFAULT_POOL_TIMEOUT_SECONDS,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
        create_database: bool = False,
        max_list_limit: int = MAX_LIST_LIMIT,
    ):
        self.database_url = database_url
        self.connect_args = connect_args or {}
        self.query_timeout = query_timeout
        self.create_database = create_database
        self.max_list_limit = max_list_limit

        engine_kwargs = {"connect_args": self.connect_args, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
            )
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_env(cls) -> "StorageGateway":
        database_url, connect_args = get_database_url_and_connect_args()
        return cls(
            database_url,
            connect_args,
            pool_size=max(1, env_int(get_db_pool_size_env(), DEFAULT_POOL_SIZE)),
            pool_timeout=env_float(get_db_pool_timeout_seconds_env(), DEFAULT_POOL_TIMEOUT_SECONDS),
            query_timeout=env_float(get_db_query_timeout_seconds_env(), DEFAULT_QUERY_TIMEOUT_SECONDS),
            create_database=env_flag(get_db_create_database_env(), True),
        )

    @property
    def backend_name(self) -> str:
        return self.engine.dialect.name

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(call(), timeout=self.query_timeout)
        except asyncio.TimeoutError as exc:
            logger.error(f"Storage {operation} timed out after {self.query_timeout}s")
            raise PersistenceError(
                f"{operation} timed out after {self.query_timeout}s", operation=operation
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception(f"Storage {operation} failed")
            raise PersistenceError(f"{operation} failed: {exc}", operation=operation) from exc

    async def _ensure_database(self) -> None:
        url = make_url(self.database_url)
        if url.get_backend_name() != "mysql" or not url.database:
            return
        database_name = url.database.replace("`", "``")
        server_engine = create_async_engine(
            url.set(database=None),
            connect_args=self.connect_args,
            poolclass=NullPool,
        )
        try:
            async with server_engine.begin() as conn:
                await conn.execute(
                    text(
                        f"CREATE DATABASE IF NOT EXISTS `{database_name}` "
                        "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                    )
                )
        finally:
            await server_engine.dispose()

    async def ensure_schema(self) -> None:
        """Create the suggestions table if it is absent. Safe to repeat."""

        async def _create():
            if self.create_database:
                await self._ensure_database()
            async with self.engine.begin() as conn:
                await conn.run_sync(
                    SQLModel.metadata.create_all,
                    tables=[SuggestionModel.__table__],
                )

        await self._run("ensure_schema", _create)

    async def insert(self, record: SuggestionModel) -> SuggestionModel:
        try:
            check_record_constraints(record)
        except PersistenceError as exc:
            logger.warning(f"Storage insert rejected: {exc.message}")
            raise

        async def _insert():
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
            return record

        return await self._run("insert", _insert)

    async def list_recent(self, limit: int) -> list[SuggestionModel]:
        limit = max(0, min(int(limit), self.max_list_limit))
        if limit == 0:
            return []

        async def _select():
            query = (
                select(SuggestionModel)
                .order_by(SuggestionModel.created_at.desc())
                .limit(limit)
            )
            async with self._session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())

        return await self._run("list_recent", _select)

    async def close(self) -> None:
        await self.engine.dispose()
