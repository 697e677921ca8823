"""FastAPI app factory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tandembrief.api.auth import router as auth_router
from tandembrief.api.auth_config import get_jwt_secret, get_site_password, is_dev_mode
from tandembrief.api.marketing import router as marketing_router
from tandembrief.api.reviews import router as reviews_router
from tandembrief.api.weather import router as weather_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Raises ValueError in production when JWT_SECRET or SITE_PASSWORD is unset.
    """
    load_dotenv()

    if not is_dev_mode():
        get_jwt_secret()
        get_site_password()

    app = FastAPI(
        title="Tandembrief API",
        description="Takeoff forecast and review insights for tandem paragliding",
        version="0.1.0",
    )

    app.state.data_dir = Path(os.environ.get("DATA_DIR", "data"))

    if is_dev_mode():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Auth routes are public; everything under /api requires a session
    app.include_router(auth_router)
    app.include_router(weather_router, prefix="/api")
    app.include_router(reviews_router, prefix="/api")
    app.include_router(marketing_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info("App created (dev mode: %s, data dir: %s)", is_dev_mode(), app.state.data_dir)
    return app
