from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from api.exception_handlers import register_exception_handlers
from api.lifespan import app_lifespan
from api.middlewares import BodySizeLimitMiddleware, RateLimitMiddleware
from api.v1.feedback.router import API_V1_FEEDBACK_ROUTER
from api.v1.system import SYSTEM_ROUTER
from utils.get_env import get_public_directory_env


def create_app() -> FastAPI:
    app = FastAPI(title="SVRX Suggestions", lifespan=app_lifespan)
    register_exception_handlers(app)

    # Routers
    app.include_router(API_V1_FEEDBACK_ROUTER)
    app.include_router(SYSTEM_ROUTER)

    # Static site goes last so it never shadows the API routes
    configured_public_dir = get_public_directory_env()
    public_dir = (
        Path(configured_public_dir)
        if configured_public_dir
        else (Path(__file__).parent.parent / "public")
    )
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")

    # Middlewares
    origins = ["*"]

    # Rate limiting middleware (added first so it runs after CORS)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(BodySizeLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
