from fastapi import APIRouter

from api.v1.feedback.endpoints.admin import ADMIN_ROUTER
from api.v1.feedback.endpoints.suggestions import SUGGESTIONS_ROUTER

API_V1_FEEDBACK_ROUTER = APIRouter()

API_V1_FEEDBACK_ROUTER.include_router(SUGGESTIONS_ROUTER)
API_V1_FEEDBACK_ROUTER.include_router(ADMIN_ROUTER)
