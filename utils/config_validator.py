"""
Configuration report for the feedback backend
Summarizes the effective database target and flags unsafe defaults at startup
"""

import logging
from typing import List, Tuple

from sqlalchemy.engine import make_url

from utils.db_utils import get_database_url_and_connect_args
from utils.get_env import (
    env_flag,
    get_admin_password_env,
    get_db_ssl_env,
    get_db_ssl_verify_env,
    get_rate_limit_calls_env,
    get_rate_limit_enabled_env,
    get_rate_limit_window_env,
    get_strict_email_validation_env,
)

logger = logging.getLogger(__name__)


class FeedbackConfig:
    """Startup checks for the feedback backend configuration"""

    @staticmethod
    def database_target() -> str:
        database_url, _ = get_database_url_and_connect_args()
        return make_url(database_url).render_as_string(hide_password=True)

    @staticmethod
    def tls_posture() -> str:
        if not env_flag(get_db_ssl_env(), False):
            return "off"
        if env_flag(get_db_ssl_verify_env(), True):
            return "strict verification"
        return "verification disabled"

    @staticmethod
    def validate_setup() -> Tuple[bool, List[str], List[str]]:
        """
        Returns:
            (is_valid, errors, warnings)
        """
        errors = []
        warnings = []

        try:
            FeedbackConfig.database_target()
        except RuntimeError as exc:
            errors.append(str(exc))

        if not get_admin_password_env():
            warnings.append("ADMIN_PASSWORD is not set; /admin accepts the default password")

        if FeedbackConfig.tls_posture() == "verification disabled":
            warnings.append("DB_SSL_VERIFY=false: database certificates are not verified")

        return len(errors) == 0, errors, warnings


def setup_config_logging() -> bool:
    """Log the configuration report; returns whether the setup is usable"""
    is_valid, errors, warnings = FeedbackConfig.validate_setup()

    if is_valid:
        logger.info(f"Database: {FeedbackConfig.database_target()} (TLS {FeedbackConfig.tls_posture()})")

    rate_limit_enabled = env_flag(get_rate_limit_enabled_env(), True)
    logger.info(
        "Rate limiting: "
        + (
            f"{get_rate_limit_calls_env() or 30} calls per {get_rate_limit_window_env() or 60}s"
            if rate_limit_enabled
            else "disabled"
        )
    )
    logger.info(
        "Email shape validation: "
        + ("on" if env_flag(get_strict_email_validation_env(), False) else "off")
    )

    for warning in warnings:
        logger.warning(warning)
    for error in errors:
        logger.error(error)

    return is_valid
