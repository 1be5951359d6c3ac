"""Shared FastAPI dependencies."""

import binascii
import secrets
from base64 import b64decode

from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from services.database import StorageGateway
from services.errors import AccessDeniedError, AuthRequiredError
from services.feedback_service import FeedbackService
from utils.get_env import get_admin_password_env, get_admin_user_env

DEFAULT_ADMIN_USER = "admin"
DEFAULT_ADMIN_PASSWORD = "change-me"


def get_storage_gateway(request: Request) -> StorageGateway:
    return request.app.state.storage_gateway


def get_feedback_service(
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> FeedbackService:
    return FeedbackService(gateway)


def get_admin_credentials() -> tuple[str, str]:
    return (
        get_admin_user_env() or DEFAULT_ADMIN_USER,
        get_admin_password_env() or DEFAULT_ADMIN_PASSWORD,
    )


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def _decode_basic_payload(param: str) -> str:
    raw = b64decode(param, validate=True)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def parse_basic_credentials(authorization: str | None) -> HTTPBasicCredentials | None:
    """
    None when no Basic credentials were offered at all.

    A Basic header that cannot be decoded or split is treated as wrong
    credentials, not as missing ones.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "basic":
        return None
    try:
        decoded = _decode_basic_payload(param)
    except (ValueError, binascii.Error) as exc:
        raise AccessDeniedError() from exc
    username, separator, password = decoded.partition(":")
    if not separator:
        raise AccessDeniedError()
    return HTTPBasicCredentials(username=username, password=password)


async def require_admin(request: Request) -> str:
    """Dependency: Basic credentials against the configured admin pair."""
    credentials = parse_basic_credentials(request.headers.get("Authorization"))
    if credentials is None:
        raise AuthRequiredError()
    expected_user, expected_password = get_admin_credentials()
    user_ok = _matches(credentials.username, expected_user)
    password_ok = _matches(credentials.password, expected_password)
    if not (user_ok and password_ok):
        raise AccessDeniedError()
    return credentials.username
