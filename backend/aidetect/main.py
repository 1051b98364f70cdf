# aidetect/main.py
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aidetect.core.config import settings
from aidetect.core.logging_config import configure_logging
from aidetect.middleware.request_logging import RequestLoggingMiddleware
from aidetect.routers.root import router as root_router
from aidetect.routers.health import router as health_router
from aidetect.routers.pdf import router as pdf_router
from aidetect.routers.detect import router as detect_router
from aidetect.core.exception_handlers import app_error_handler, unhandled_exception_handler
from aidetect.core import AppError

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pooled client for all calls to the detection service
    app.state.http = httpx.AsyncClient(headers={"Content-Type": "application/json"})
    try:
        yield
    finally:
        await app.state.http.aclose()
        app.state.http = None


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:5173,https://yourapp.example"
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS)
    if not allow_origins:
        allow_origins = ["http://localhost:5173", "http://localhost:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(pdf_router)
    app.include_router(detect_router)

    return app


app = create_app()
