import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from receipt_desk.api.entities import router as entities_router
from receipt_desk.api.error_handlers import register_error_handlers
from receipt_desk.api.receipts import router as receipts_router
from receipt_desk.api.schedules import router as schedules_router
from receipt_desk.core.config import Settings, get_settings
from receipt_desk.db.seed import seed_sample_data
from receipt_desk.db.storage import Storage

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The database is only touched once the server starts, never on import
        if app.state.storage is None:
            app.state.storage = Storage.from_url(settings.DATABASE_URL)
            if settings.SEED_SAMPLE_DATA:
                seed_sample_data(app.state.storage)
        logger.info(
            "%s ready (database: %s)", settings.PROJECT_NAME, app.state.storage.engine.url
        )
        yield

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.storage = storage

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(receipts_router)
    app.include_router(schedules_router)
    app.include_router(entities_router)
    register_error_handlers(app)

    return app


app = create_app()
