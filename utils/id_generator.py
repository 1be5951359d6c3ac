import secrets
import string
import time
import uuid

from utils.get_env import get_id_scheme_env

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def make_uuid_id() -> str:
    """128-bit random id as 32 hex chars."""
    return uuid.uuid4().hex


def make_time_based_id() -> str:
    """Legacy scheme: base36 epoch millis, a dash, six random base36 chars."""
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{_to_base36(millis)}-{suffix}"


ID_SCHEMES = {
    "uuid": make_uuid_id,
    "time": make_time_based_id,
}


def make_suggestion_id(scheme: str | None = None) -> str:
    scheme = (scheme or get_id_scheme_env() or "uuid").strip().lower()
    generator = ID_SCHEMES.get(scheme, make_uuid_id)
    return generator()
