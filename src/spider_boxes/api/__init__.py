import logging
import os
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import (
    DuplicateRegistrationError,
    NotFoundError,
    StoreUnavailableError,
    ValidationFailedError,
)
from .routes import instances, meta, types

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(request: Request, exc: ValidationFailedError):
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "errors": exc.messages, "fields": exc.fields},
        )

    @app.exception_handler(DuplicateRegistrationError)
    async def duplicate_handler(request: Request, exc: DuplicateRegistrationError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error(f"Store unavailable while handling {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app(config_obj=None, core=None) -> FastAPI:
    from ..config import Config
    from ..core import Core
    from ..db import close_db, create_tables, init_db

    if core is None:
        if config_obj is None:
            config_file = os.environ.get("CONFIG_FILE", "config.toml")
            if Path(config_file).exists():
                config_obj = Config.load_from_file(config_file)
            else:
                logger.warning(f"Configuration file not found: {config_file}, using defaults")
                config_obj = Config()

        core = Core(config_obj)
        if core.uses_database:
            db_path = os.environ.get("SPIDER_BOXES_DB_PATH", config_obj.storage.database_path)
            init_db(db_path)
            create_tables()

    app = FastAPI(title="Spider Boxes API")
    app.state.config = core.config
    app.state.core = core

    register_exception_handlers(app)

    api_router = APIRouter(prefix="/api/v1")
    for router in types.routers + instances.routers:
        api_router.include_router(router)
    api_router.include_router(meta.router)
    app.include_router(api_router)

    @app.on_event("shutdown")
    def shutdown_db():
        if core.uses_database:
            close_db()

    return app
