import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from models.sql.suggestion import SuggestionModel
from services.database import ADMIN_LIST_LIMIT, API_LIST_LIMIT, StorageGateway
from services.validation import validate_submission
from utils.get_env import env_flag, get_strict_email_validation_env
from utils.id_generator import make_suggestion_id

logger = logging.getLogger(__name__)


def iso_utc(value: datetime) -> str:
    # Naive values come back from backends that drop tzinfo; they were stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_suggestion(row: SuggestionModel) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "email": row.email,
        "type": row.type,
        "message": row.message,
        "impact": row.impact or "",
        "extra": row.extra or "",
        "created_at": iso_utc(row.created_at),
    }


class FeedbackService:
    """Submission and listing on top of a StorageGateway."""

    def __init__(
        self,
        gateway: StorageGateway,
        *,
        strict_email: bool | None = None,
        list_limit: int = API_LIST_LIMIT,
    ):
        self.gateway = gateway
        self.strict_email = (
            strict_email
            if strict_email is not None
            else env_flag(get_strict_email_validation_env(), False)
        )
        self.list_limit = list_limit

    async def submit(self, payload: Mapping[str, Any] | None) -> SuggestionModel:
        draft = validate_submission(payload, strict_email=self.strict_email)
        record = SuggestionModel(
            id=make_suggestion_id(),
            name=draft.name,
            email=draft.email,
            type=draft.type,
            message=draft.message,
            impact=draft.impact,
            extra=draft.extra,
            created_at=datetime.now(timezone.utc),
        )
        stored = await self.gateway.insert(record)
        logger.info(f"Stored suggestion {stored.id} ({stored.type})")
        return stored

    async def list_recent(self, limit: int | None = None) -> list[SuggestionModel]:
        limit = self.list_limit if limit is None else min(limit, self.list_limit)
        return await self.gateway.list_recent(limit)

    async def list_for_admin(self) -> list[SuggestionModel]:
        return await self.gateway.list_recent(ADMIN_LIST_LIMIT)
