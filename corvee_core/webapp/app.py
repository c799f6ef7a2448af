# corvee_core/webapp/app.py
from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from ..config import DEFAULT_CONFIG_PATH, Config
from .api import router as api_router
from .container import ServiceContainer


def create_app(
    *,
    config_path: str | None = None,
    roster_path: str | None = None,
    config: Config | None = None,
    today: Callable[[], date] = date.today,
) -> FastAPI:
    """Create the FastAPI application around a single in-memory session."""

    # CORVEE_* variables may come from a .env file
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    app_logger = logging.getLogger("corvee_webapp")

    app = FastAPI(
        title="Corvee API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        description="Monthly household task distribution",
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        app_logger.info(
            "[HTTP] %s %s -> %d (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app_logger.info("[INIT] Config path: %s", config_path or str(DEFAULT_CONFIG_PATH))
    app_logger.info("[INIT] Roster: %s", roster_path or "(seed)")
    container = ServiceContainer(
        config_path=config_path or str(DEFAULT_CONFIG_PATH),
        roster_path=roster_path,
        config=config,
        today=today,
    )
    app.state.container = container

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/")
    def root() -> RedirectResponse:
        return RedirectResponse(url="/docs", status_code=302)

    return app
