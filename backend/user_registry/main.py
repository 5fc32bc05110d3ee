"""
HTTP entry point.

Run with: uvicorn user_registry.main:create_app --factory
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from user_registry import __version__
from user_registry.config import Settings, load_settings
from user_registry.database import build_engine, init_db
from user_registry.logging_config import configure_logging
from user_registry.routes import users

APP_NAME = "User Registry API"

logger = logging.getLogger(__name__)

_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Compose the HTTP application.

    The engine is created here (or injected by tests) and owned by the app;
    request handlers reach it through ``app.state.engine``.
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)
    owns_engine = engine is None
    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo)

    app = FastAPI(title=APP_NAME, version=__version__)
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_DEFAULT_CORS_ORIGINS + settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users.router, prefix="/api", tags=["users"])

    @app.on_event("startup")
    def on_startup():
        init_db(app.state.engine)
        logger.info("Database ready at %s", app.state.engine.url)

    @app.on_event("shutdown")
    def on_shutdown():
        # An injected engine belongs to the caller
        if owns_engine:
            app.state.engine.dispose()

    @app.get("/api/health")
    def health_check():
        """Diagnostic endpoint to verify which code is running"""
        return {"app_name": APP_NAME, "version": __version__, "status": "healthy"}

    return app
