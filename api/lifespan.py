from contextlib import asynccontextmanager
import asyncio
import logging

from fastapi import FastAPI

from services.database import StorageGateway
from services.errors import InitializationError
from utils.config_validator import setup_config_logging
from utils.get_env import env_float, get_db_startup_timeout_seconds_env

logger = logging.getLogger(__name__)

DEFAULT_DB_STARTUP_TIMEOUT_SECONDS = 20.0


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Builds the storage gateway and ensures the schema before serving;
    any failure aborts startup instead of serving half-initialized.
    """
    setup_config_logging()

    db_startup_timeout_seconds = env_float(
        get_db_startup_timeout_seconds_env(), DEFAULT_DB_STARTUP_TIMEOUT_SECONDS
    )
    try:
        gateway = StorageGateway.from_env()
    except Exception as exc:
        logger.exception("Failed to configure the database pool")
        raise InitializationError(f"Failed to configure the database pool: {exc}") from exc

    try:
        await asyncio.wait_for(gateway.ensure_schema(), timeout=db_startup_timeout_seconds)
    except Exception as exc:
        logger.exception("Failed to initialize the database")
        await gateway.close()
        raise InitializationError(f"Failed to initialize the database: {exc}") from exc

    app.state.storage_gateway = gateway
    logger.info(f"Database initialized ({gateway.backend_name}) and suggestions table ensured")
    try:
        yield
    finally:
        await gateway.close()
        logger.info("Database pool closed")
