"""
Application factory.

The storage handle is explicit: create_app receives (or builds) an engine and
keeps its own session factory on app.state, so several apps with isolated
databases can live in one process.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from chore_tracker.constants import CORS_ALLOWED_ORIGINS, SCHEDULER_ENABLED
from chore_tracker.database import create_session_factory, init_db
from chore_tracker.exceptions import DatabaseException
from chore_tracker.migrations import auto_migrate
from chore_tracker.routes import admin, kids
from chore_tracker.services.scheduler_service import start_scheduler, stop_scheduler
from chore_tracker.services.settings_service import SettingsService

logger = logging.getLogger("chore_tracker")


def create_app(engine: Optional[Engine] = None, enable_scheduler: bool = SCHEDULER_ENABLED) -> FastAPI:
    if engine is None:
        from chore_tracker.database import engine as default_engine
        engine = default_engine

    app = FastAPI(
        title="Chore Tracker API",
        description="Household chores, extra tasks and reward points for kids",
        version="1.0.0"
    )
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    @app.on_event("startup")
    async def startup_event():
        init_db(engine)
        try:
            auto_migrate(engine)
        except DatabaseException as e:
            logger.error(f"Auto-migration failed: {e}")
            # Keep serving with the existing schema

        db = app.state.session_factory()
        try:
            SettingsService(db).initialize_default_settings()
        finally:
            db.close()

        logger.info("Chore Tracker API started")
        if enable_scheduler:
            start_scheduler(app.state.session_factory)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Chore Tracker API")
        if enable_scheduler:
            stop_scheduler()

    @app.get("/")
    async def root():
        return {"message": "Chore Tracker API", "status": "active"}

    app.include_router(kids.router)
    app.include_router(admin.router)

    return app
