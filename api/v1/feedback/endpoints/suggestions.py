from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.deps import get_feedback_service
from services.errors import ValidationError
from services.feedback_service import FeedbackService, serialize_suggestion

SUGGESTIONS_ROUTER = APIRouter(prefix="/api", tags=["Feedback"])

INVALID_BODY_MESSAGE = "Invalid request body."


async def read_submission_payload(request: Request) -> dict[str, Any]:
    """Accept JSON objects and form bodies; anything else reads as empty."""
    content_type = request.headers.get("content-type", "").lower()
    try:
        if "application/json" in content_type:
            body = await request.json()
            return body if isinstance(body, dict) else {}
        if "form" in content_type:
            form = await request.form()
            return {key: value for key, value in form.items() if isinstance(value, str)}
    except ValueError as exc:
        raise ValidationError(INVALID_BODY_MESSAGE) from exc
    return {}


@SUGGESTIONS_ROUTER.post("/feedback", status_code=201)
async def submit_feedback(
    request: Request,
    service: FeedbackService = Depends(get_feedback_service),
):
    payload = await read_submission_payload(request)
    stored = await service.submit(payload)
    return JSONResponse(
        status_code=201,
        content={"ok": True, "id": stored.id, "item": serialize_suggestion(stored)},
    )


@SUGGESTIONS_ROUTER.get("/suggestions")
async def list_suggestions(service: FeedbackService = Depends(get_feedback_service)):
    rows = await service.list_recent()
    return {"ok": True, "items": [serialize_suggestion(row) for row in rows]}
