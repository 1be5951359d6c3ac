from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.deps import get_feedback_service, require_admin
from services.admin_renderer import render_admin_page
from services.feedback_service import FeedbackService

ADMIN_ROUTER = APIRouter(tags=["Admin"])


@ADMIN_ROUTER.get("/admin", response_class=HTMLResponse)
async def admin_dashboard(
    _admin: str = Depends(require_admin),
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Read-only dashboard of the most recent suggestions.

    Basic credentials are checked on every request before anything is read.
    """
    rows = await service.list_for_admin()
    return HTMLResponse(render_admin_page(rows))
